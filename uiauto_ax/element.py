# uiauto_ax/element.py
"""
@file element.py
@brief Element proxy over an opaque accessibility node handle.

An Element owns one handle and the attribute names the node reported when
the proxy was built. Symbolic names (``title``, ``enabled?``,
``is_focused``) are resolved against those names; anything that is not a
declared method goes through an explicit dispatch plan: attribute first,
then parameterized attribute, then (for nodes with children) an implicit
search.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .exceptions import LookupFailure, ReadOnlyAttribute, SearchFailure, ServiceError
from .interfaces import IHandleService
from .massager import process, to_wire
from .naming import RESOLUTION_CACHE, notification_for, strip_prefix, underscore
from .roles import ROLES
from .values import Point

log = logging.getLogger("uiauto_ax.element")


def _safe(fn: Callable[[], Any], default: Any = None) -> Any:
    try:
        return fn()
    except Exception:
        return default


class DispatchKind(Enum):
    ATTRIBUTE = "attribute"
    PARAM_ATTRIBUTE = "param_attribute"
    SEARCH = "search"


@dataclass(frozen=True)
class Dispatch:
    """Outcome of resolving a dynamic name against a node."""
    kind: DispatchKind
    name: str
    identifier: Optional[str] = None


class Element:
    """
    Typed, name-resolving proxy for one node of the accessibility tree.

    Concrete subclasses are picked (or synthesized) from the node's role by
    the role registry, so ``type(element).__name__`` is the role name.
    Proxies hold no external resource; equality follows the wrapped handle.
    """

    def __init__(self, handle: Any, service: IHandleService):
        """
        @param handle Opaque node handle owned by the service
        @param service Node Handle Service the handle belongs to
        """
        self._handle = handle
        self._service = service
        self._attributes: Tuple[str, ...] = tuple(service.attribute_names(handle))
        self._param_attributes: Optional[Tuple[str, ...]] = None
        self._pid: Optional[int] = None

    @property
    def handle(self) -> Any:
        return self._handle

    @property
    def service(self) -> IHandleService:
        return self._service

    @property
    def attributes(self) -> Tuple[str, ...]:
        """Attribute identifiers captured when the proxy was built."""
        return self._attributes

    @property
    def param_attributes(self) -> Tuple[str, ...]:
        if self._param_attributes is None:
            self._param_attributes = tuple(self._service.param_attribute_names(self._handle))
        return self._param_attributes

    @property
    def actions(self) -> Tuple[str, ...]:
        """Available actions; re-queried on every access."""
        return tuple(self._service.action_names(self._handle))

    @property
    def pid(self) -> int:
        """Process identifier of the application owning this node."""
        if self._pid is None:
            self._pid = self._service.pid_of(self._handle)
        return self._pid

    # --- Name resolution ---

    def _attribute_for(self, name: Any) -> Optional[str]:
        return RESOLUTION_CACHE.resolve(self._attributes, name)

    def _param_attribute_for(self, name: Any) -> Optional[str]:
        return RESOLUTION_CACHE.resolve(self.param_attributes, name)

    def _action_for(self, name: Any) -> Optional[str]:
        return RESOLUTION_CACHE.resolve(self.actions, name)

    def respond_to(self, name: Any) -> bool:
        """True if ``name`` is an attribute or parameterized attribute of this node."""
        return self._attribute_for(name) is not None or self._param_attribute_for(name) is not None

    # --- Attributes ---

    def attribute(self, name: Any) -> Any:
        """
        Read an attribute by symbolic name.

        @param name Symbolic name or exact identifier
        @return Massaged value, or None when the node has no value for it
        @throws LookupFailure if the node has no such attribute
        """
        real = self._attribute_for(name)
        if real is None:
            raise LookupFailure(name)
        return self._read(real)

    def attribute_writable(self, name: Any) -> bool:
        real = self._attribute_for(name)
        if real is None:
            raise LookupFailure(name)
        return bool(self._service.attribute_writable(self._handle, real))

    def set_attribute(self, name: Any, value: Any) -> Any:
        """
        Write an attribute.

        The state of the node after the write is not assumed to be
        observable yet, so the value passed in is returned, not a re-read.

        @throws LookupFailure if the node has no such attribute
        @throws ReadOnlyAttribute if the attribute is not writable
        """
        if not self.attribute_writable(name):
            raise ReadOnlyAttribute(name)
        real = self._attribute_for(name)
        ok = self._service.write_attribute(self._handle, real, to_wire(self._service, value))
        if ok is False:
            raise ServiceError(f"Failed to set {real} on {self._handle!r}")
        log.debug("set %s=%r on %s", real, value, type(self).__name__)
        return value

    def param_attribute(self, name: Any, param: Any) -> Any:
        real = self._param_attribute_for(name)
        if real is None:
            raise LookupFailure(name, kind="parameterized attribute")
        return self._read_param(real, param)

    def _read(self, identifier: str) -> Any:
        return process(self._service, self._service.read_attribute(self._handle, identifier))

    def _read_param(self, identifier: str, param: Any = None) -> Any:
        raw = self._service.read_param_attribute(
            self._handle, identifier, to_wire(self._service, param)
        )
        return process(self._service, raw)

    # --- Actions ---

    def perform_action(self, name: Any) -> bool:
        """
        Invoke an action.

        The action may destroy or reparent the node (pressing a window's
        close button), so this proxy may be stale afterwards.

        @return True if the service reported success
        """
        real = self._action_for(name)
        if real is None:
            raise LookupFailure(name, kind="action")
        result = bool(self._service.perform_action(self._handle, real))
        log.debug("performed %s on %s -> %s", real, type(self).__name__, result)
        return result

    # --- Search ---

    def search(self, element_type: Any, filters: Optional[Dict[str, Any]] = None, /, **kw_filters: Any) -> Any:
        """
        Breadth-first search of the subtree rooted here.

        A plural type name (``buttons``) returns a list, possibly empty. A
        singular one (``button``) returns the first match and raises
        SearchFailure when there is none.

            window.search("button", title="Log In")
            window.search("text_fields", {"enabled": True})
        """
        from .search import search

        result = search(self, element_type, _merge_filters(filters, kw_filters))
        if isinstance(result, list):
            return result
        return result.unwrap(self)

    def _implicit_search(self, name: str, filters: Optional[Dict[str, Any]] = None, /, **kw_filters: Any) -> Any:
        from .search import search

        merged = _merge_filters(filters, kw_filters)
        result = search(self, name, merged)
        if isinstance(result, list):
            if not result:
                raise SearchFailure(self, name, merged)
            return result
        return result.unwrap(self, searchee=name)

    # --- Dynamic dispatch ---

    def plan(self, name: str) -> Dispatch:
        """
        Decide how a dynamic name is served.

        @throws AttributeError if the name is neither an attribute nor a
                parameterized attribute and the node cannot be searched
        """
        real = self._attribute_for(name)
        if real is not None:
            return Dispatch(DispatchKind.ATTRIBUTE, name, real)
        real = self._param_attribute_for(name)
        if real is not None:
            return Dispatch(DispatchKind.PARAM_ATTRIBUTE, name, real)
        if self._attribute_for("children") is not None:
            return Dispatch(DispatchKind.SEARCH, name)
        raise AttributeError(f"{type(self).__name__!r} element has no attribute {name!r}")

    def dispatch(self, name: str, /, *args: Any, **filters: Any) -> Any:
        """
        Serve a dynamic name with call arguments.

        Parameterized attributes take the first positional argument as the
        parameter; searches take it as a filter mapping (keyword filters are
        merged in).
        """
        plan = self.plan(name)
        first = args[0] if args else None
        if plan.kind is DispatchKind.ATTRIBUTE:
            return self._read(plan.identifier)
        if plan.kind is DispatchKind.PARAM_ATTRIBUTE:
            return self._read_param(plan.identifier, first)
        return self._implicit_search(name, first, **filters)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        plan = self.plan(name)
        if plan.kind is DispatchKind.ATTRIBUTE:
            return self._read(plan.identifier)
        if plan.kind is DispatchKind.PARAM_ATTRIBUTE:
            return functools.partial(self._read_param, plan.identifier)
        return functools.partial(self._implicit_search, name)

    def __dir__(self) -> List[str]:
        names = [underscore(strip_prefix(x)) for x in self._attributes]
        names += [underscore(strip_prefix(x)) for x in _safe(lambda: self.param_attributes, ())]
        return sorted(set(list(super().__dir__()) + names))

    # --- Notifications ---

    def on_notification(self, name: Any, callback: Optional[Callable[["Element", str], bool]] = None) -> Any:
        """
        Register for a notification posted by this node.

        The callback gets the posting element and the notification name and
        returns True when the delivery is the expected one.

        @return Service subscription token
        """
        notification = notification_for(name)
        service = self._service

        def handler(raw: Any, delivered: str) -> bool:
            element = process(service, raw)
            return bool(callback(element, delivered)) if callback else True

        subscription = service.register_notification(self._handle, notification, handler)
        log.debug("registered for %s on %s", notification, type(self).__name__)
        return subscription

    # --- Geometry ---

    def to_point(self) -> Point:
        """Centre of the element on screen."""
        return self.attribute("position").center(self.attribute("size"))

    # --- Identity ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self._handle == other._handle

    def __hash__(self) -> int:
        return hash(self._handle)

    def __repr__(self) -> str:
        parts = [f"<{type(self).__name__}"]
        identifier = self._pp_identifier()
        if identifier:
            parts.append(identifier)
        if self._attribute_for("position") is not None:
            position = _safe(lambda: self.attribute("position"))
            if isinstance(position, Point):
                parts.append(f"({position.x:.0f}, {position.y:.0f})")
        if self._attribute_for("children") is not None:
            children = _safe(lambda: self.attribute("children"))
            if isinstance(children, list):
                parts.append(f"{len(children)} children")
        for flag in ("enabled", "focused"):
            if self._attribute_for(flag) is not None:
                mark = "x" if _safe(lambda: self.attribute(flag)) else " "
                parts.append(f"[{mark}]{flag}")
        return " ".join(parts) + ">"

    def _pp_identifier(self) -> Optional[str]:
        for name in ("title", "value", "identifier"):
            if self._attribute_for(name) is None:
                continue
            value = _safe(lambda: self.attribute(name))
            if value is None or value == "":
                continue
            if name == "title":
                return repr(value)
            return f"{name}={value!r}"
        return None


class Application(Element):
    """Root element of an application's tree."""

    def __repr__(self) -> str:
        title = _safe(lambda: self.attribute("title")) if self._attribute_for("title") else None
        label = repr(title) if title else "?"
        return f"<Application {label} pid={_safe(lambda: self.pid)}>"


class SystemWide(Element):
    """
    The special system-wide element.

    It cannot be searched or observed; it is used to find the element at a
    screen point and to set the global messaging timeout.
    """

    @classmethod
    def for_service(cls, service: IHandleService) -> "SystemWide":
        return cls(service.system_wide_handle(), service)

    def element_at(self, point: Point) -> Optional[Element]:
        """Element at a screen point in the topmost window, or None."""
        return process(self._service, self._service.element_at(self._handle, point))

    def set_global_timeout(self, seconds: float) -> float:
        """Messaging timeout applied to every subsequent round trip."""
        self._service.set_timeout(self._handle, seconds)
        log.info("Global messaging timeout set to %ss", seconds)
        return seconds

    def search(self, *args: Any, **kwargs: Any) -> Any:
        raise TypeError("SystemWide cannot search")

    def on_notification(self, *args: Any, **kwargs: Any) -> Any:
        raise TypeError("SystemWide cannot register for notifications")


def _merge_filters(filters: Optional[Dict[str, Any]], extra: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(filters or {})
    merged.update(extra)
    return merged


ROLES.register("Element", Element)
ROLES.register("Application", Application)
ROLES.register("SystemWide", SystemWide)
