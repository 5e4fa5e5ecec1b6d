# uiauto_ax/backends/memory.py
"""
@file memory.py
@brief In-process Node Handle Service over a tree described in YAML or a dict.

Fixture format (one application, or ``applications: [...]`` for several)::

    role: AXApplication
    pid: 42
    attributes:
      AXTitle: Finder
    children:
      - role: AXWindow
        id: main
        attributes:
          AXTitle: Main
          AXPosition: {point: [0, 0]}
          AXSize: {size: [800, 600]}
        writable: [AXPosition]
        actions: [AXRaise]
        children:
          - role: AXButton
            subrole: AXCloseButton
            attributes: {AXTitle: Close, AXEnabled: true}
          - role: AXStaticText
            attributes: {AXValue: "Hello world"}
            param_attributes: {AXStringForRange: "Hello world"}

``AXRole``, ``AXSubrole``, ``AXParent`` and ``AXChildren`` are derived from
the structure; ``AXChildren`` is only reported by nodes that declare a
``children`` key. ``{ref: <id>}`` points at another node by its ``id``.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import yaml

from ..exceptions import ConfigError, InvalidHandleError, ServiceError
from ..interfaces import IHandleService, NotificationCallback
from ..values import Boxed, Point, Range, Rect, Size

log = logging.getLogger("uiauto_ax.backends.memory")

SYSTEM_WIDE_ID = 0

BOX_KINDS = ("point", "size", "rect", "range")

_FIELD_COUNTS = {"point": 2, "size": 2, "rect": 4, "range": 2}

_NODE_KEYS = {"role", "subrole", "id", "pid", "attributes", "writable", "actions", "param_attributes", "children"}


@dataclass(frozen=True)
class MemoryHandle:
    node_id: int

    def __repr__(self) -> str:
        return f"MemoryHandle({self.node_id})"


@dataclass(frozen=True)
class BoxedValue:
    """Wire form of a geometry or range value."""
    kind: str
    fields: Tuple[float, ...]


@dataclass(frozen=True)
class _Ref:
    name: str


@dataclass
class MemoryNode:
    node_id: int
    roles: List[str]
    pid: int
    attributes: Dict[str, Any] = field(default_factory=dict)
    writable: Set[str] = field(default_factory=set)
    actions: List[str] = field(default_factory=list)
    param_attributes: Dict[str, Any] = field(default_factory=dict)
    children: Optional[List[int]] = None
    parent: Optional[int] = None
    name: Optional[str] = None

    def attribute_names(self) -> List[str]:
        names = ["AXRole"]
        if len(self.roles) > 1:
            names.append("AXSubrole")
        names.extend(self.attributes)
        if self.parent is not None:
            names.append("AXParent")
        if self.children is not None:
            names.append("AXChildren")
        return names


class MemoryHandleService(IHandleService):
    """
    Node Handle Service backed by ``MemoryNode`` objects.

    Every primitive call is appended to ``calls`` as ``(operation, args...)``.
    Failures can be injected per node with ``break_children`` and
    ``invalidate``; notifications are delivered with ``post_notification``.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._nodes: Dict[int, MemoryNode] = {}
        self._names: Dict[str, int] = {}
        self._apps: List[int] = []
        self._broken_children: Dict[int, ServiceError] = {}
        self._invalid: Set[int] = set()
        self._subscriptions: Dict[int, Tuple[int, str, NotificationCallback]] = {}
        self._tokens = itertools.count(1)
        self.calls: List[Tuple[Any, ...]] = []
        self.timeouts: Dict[MemoryHandle, float] = {}
        self.global_timeout: Optional[float] = None
        self.performed: List[Tuple[MemoryHandle, str]] = []
        self._nodes[SYSTEM_WIDE_ID] = MemoryNode(
            node_id=SYSTEM_WIDE_ID,
            roles=["AXSystemWide"],
            pid=0,
            attributes={"AXFocusedApplication": None},
        )

    # ---- construction ----------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MemoryHandleService:
        if not isinstance(data, dict):
            raise ConfigError("Tree fixture must be a mapping at root.")
        service = cls()
        apps = data["applications"] if "applications" in data else [data]
        if not isinstance(apps, list) or not apps:
            raise ConfigError("'applications' must be a non-empty list")
        for i, fixture in enumerate(apps):
            service.add_tree(fixture, where=f"applications[{i}]")
        return service

    @classmethod
    def from_yaml(cls, path: str) -> MemoryHandleService:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Tree fixture not readable: {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        return cls.from_dict(data)

    def add_tree(self, fixture: Dict[str, Any], parent: Optional[MemoryHandle] = None, where: str = "root") -> MemoryHandle:
        """
        Build nodes for ``fixture`` and attach them under ``parent`` (or as a
        new top-level application). Safe to call while the tree is in use.
        """
        with self._lock:
            parent_node = self._node(parent) if parent is not None else None
            pid = parent_node.pid if parent_node else 1
            node_id = self._build(fixture, parent_node.node_id if parent_node else None, pid, where)
            if parent_node is None:
                self._apps.append(node_id)
                if self._nodes[SYSTEM_WIDE_ID].attributes["AXFocusedApplication"] is None:
                    self._nodes[SYSTEM_WIDE_ID].attributes["AXFocusedApplication"] = MemoryHandle(node_id)
            else:
                if parent_node.children is None:
                    parent_node.children = []
                parent_node.children.append(node_id)
            self._resolve_refs()
        log.debug("Added %s node tree at %s", fixture.get("role"), where)
        return MemoryHandle(node_id)

    def remove(self, handle: MemoryHandle) -> None:
        """Detach a node (and its subtree) from its parent and invalidate it."""
        with self._lock:
            node = self._node(handle)
            if node.parent is not None:
                siblings = self._nodes[node.parent].children or []
                if node.node_id in siblings:
                    siblings.remove(node.node_id)
            elif node.node_id in self._apps:
                self._apps.remove(node.node_id)
            for node_id in self._subtree(node.node_id):
                self._invalid.add(node_id)

    def _build(self, fixture: Any, parent: Optional[int], pid: int, where: str) -> int:
        if not isinstance(fixture, dict):
            raise ConfigError(f"{where}: node must be a mapping, got {type(fixture).__name__}")
        unknown = set(fixture) - _NODE_KEYS
        if unknown:
            raise ConfigError(f"{where}: unknown node keys: {sorted(unknown)}")
        role = fixture.get("role")
        if not isinstance(role, str) or not role:
            raise ConfigError(f"{where}: 'role' must be a non-empty string")

        node_id = next(self._ids)
        roles = [fixture["subrole"], role] if fixture.get("subrole") else [role]
        node = MemoryNode(
            node_id=node_id,
            roles=roles,
            pid=int(fixture.get("pid", pid)),
            attributes={k: _parse_value(v) for k, v in (fixture.get("attributes") or {}).items()},
            writable=set(fixture.get("writable") or []),
            actions=list(fixture.get("actions") or []),
            param_attributes={k: _parse_value(v) for k, v in (fixture.get("param_attributes") or {}).items()},
            parent=parent,
            name=fixture.get("id"),
        )
        self._nodes[node_id] = node
        if node.name:
            if node.name in self._names:
                raise ConfigError(f"{where}: duplicate node id {node.name!r}")
            self._names[node.name] = node_id

        if "children" in fixture:
            kids = fixture.get("children") or []
            if not isinstance(kids, list):
                raise ConfigError(f"{where}.children must be a list")
            node.children = [
                self._build(kid, node_id, node.pid, f"{where}.children[{i}]")
                for i, kid in enumerate(kids)
            ]
        return node_id

    def _resolve_refs(self) -> None:
        def resolve(value: Any) -> Any:
            if isinstance(value, _Ref):
                if value.name not in self._names:
                    raise ConfigError(f"Reference to unknown node id {value.name!r}")
                return MemoryHandle(self._names[value.name])
            if isinstance(value, list):
                return [resolve(v) for v in value]
            return value

        for node in self._nodes.values():
            for key, value in node.attributes.items():
                node.attributes[key] = resolve(value)

    def _subtree(self, node_id: int) -> Iterable[int]:
        stack = [node_id]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._nodes[current].children or []))

    # ---- lookup helpers for tests and tools ------------------------------

    @property
    def applications(self) -> List[MemoryHandle]:
        return [MemoryHandle(i) for i in self._apps]

    def handle_named(self, name: str) -> MemoryHandle:
        """Handle of the node declared with ``id: <name>``."""
        try:
            return MemoryHandle(self._names[name])
        except KeyError:
            raise KeyError(f"No node with id {name!r}") from None

    def node(self, handle: MemoryHandle) -> MemoryNode:
        return self._node(handle)

    # ---- failure injection -----------------------------------------------

    def break_children(self, handle: MemoryHandle, error: Optional[ServiceError] = None) -> None:
        """Make reading ``AXChildren`` on this node fail."""
        self._broken_children[handle.node_id] = error or InvalidHandleError(handle, "children unavailable")

    def invalidate(self, handle: MemoryHandle) -> None:
        """Every later call on this handle raises InvalidHandleError."""
        self._invalid.add(handle.node_id)

    # ---- notifications ---------------------------------------------------

    def post_notification(self, handle: MemoryHandle, notification: str, sender: Optional[MemoryHandle] = None) -> List[bool]:
        """
        Deliver ``notification`` to every callback registered for it on
        ``handle``. May be called from any thread.

        @return The callbacks' answers, in registration order
        """
        sender = sender or handle
        with self._lock:
            targets = [
                cb for (node_id, name, cb) in self._subscriptions.values()
                if node_id == handle.node_id and name == notification
            ]
        log.debug("Posting %s on %r to %d subscriber(s)", notification, handle, len(targets))
        return [bool(cb(sender, notification)) for cb in targets]

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    # ---- IHandleService ----------------------------------------------------

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation,) + args)

    def _node(self, handle: Any) -> MemoryNode:
        if not isinstance(handle, MemoryHandle):
            raise InvalidHandleError(handle, "not a memory handle")
        if handle.node_id in self._invalid:
            raise InvalidHandleError(handle)
        try:
            return self._nodes[handle.node_id]
        except KeyError:
            raise InvalidHandleError(handle, "unknown node") from None

    def role_of(self, handle: Any) -> List[str]:
        self._record("role_of", handle)
        return list(self._node(handle).roles)

    def attribute_names(self, handle: Any) -> List[str]:
        self._record("attribute_names", handle)
        return self._node(handle).attribute_names()

    def action_names(self, handle: Any) -> List[str]:
        self._record("action_names", handle)
        return list(self._node(handle).actions)

    def param_attribute_names(self, handle: Any) -> List[str]:
        self._record("param_attribute_names", handle)
        return list(self._node(handle).param_attributes)

    def read_attribute(self, handle: Any, attribute: str) -> Any:
        self._record("read_attribute", handle, attribute)
        node = self._node(handle)
        if attribute == "AXRole":
            return node.roles[-1]
        if attribute == "AXSubrole":
            return node.roles[0] if len(node.roles) > 1 else None
        if attribute == "AXParent":
            return MemoryHandle(node.parent) if node.parent is not None else None
        if attribute == "AXChildren":
            broken = self._broken_children.get(node.node_id)
            if broken is not None:
                raise broken
            if node.children is None:
                return None
            with self._lock:
                return [MemoryHandle(i) for i in node.children if i not in self._invalid]
        value = node.attributes.get(attribute)
        return list(value) if isinstance(value, list) else value

    def read_param_attribute(self, handle: Any, attribute: str, param: Any) -> Any:
        self._record("read_param_attribute", handle, attribute, param)
        value = self._node(handle).param_attributes.get(attribute)
        if callable(value):
            return value(self.unbox(param) if self.is_boxed(param) else param)
        if isinstance(value, str) and isinstance(param, BoxedValue) and param.kind == "range":
            location, length = (int(f) for f in param.fields)
            return value[location:location + length]
        return value

    def attribute_writable(self, handle: Any, attribute: str) -> bool:
        self._record("attribute_writable", handle, attribute)
        return attribute in self._node(handle).writable

    def write_attribute(self, handle: Any, attribute: str, value: Any) -> bool:
        self._record("write_attribute", handle, attribute, value)
        node = self._node(handle)
        if attribute not in node.attributes or attribute not in node.writable:
            return False
        node.attributes[attribute] = value
        return True

    def perform_action(self, handle: Any, action: str) -> bool:
        self._record("perform_action", handle, action)
        node = self._node(handle)
        if action not in node.actions:
            return False
        self.performed.append((handle, action))
        return True

    def register_notification(self, handle: Any, notification: str, callback: NotificationCallback) -> Any:
        self._record("register_notification", handle, notification)
        node = self._node(handle)
        with self._lock:
            token = next(self._tokens)
            self._subscriptions[token] = (node.node_id, notification, callback)
        return token

    def unregister_notification(self, subscription: Any) -> None:
        self._record("unregister_notification", subscription)
        with self._lock:
            self._subscriptions.pop(subscription, None)

    def pid_of(self, handle: Any) -> int:
        self._record("pid_of", handle)
        return self._node(handle).pid

    def set_timeout(self, handle: Any, seconds: float) -> None:
        self._record("set_timeout", handle, seconds)
        node = self._node(handle)
        self.timeouts[handle] = float(seconds)
        if node.node_id == SYSTEM_WIDE_ID:
            self.global_timeout = float(seconds)

    def is_handle(self, raw: Any) -> bool:
        return isinstance(raw, MemoryHandle)

    def is_boxed(self, raw: Any) -> bool:
        return isinstance(raw, BoxedValue)

    def unbox(self, raw: Any) -> Boxed:
        return _unbox(raw)

    def box(self, value: Boxed) -> Any:
        if isinstance(value, Point):
            return BoxedValue("point", (value.x, value.y))
        if isinstance(value, Size):
            return BoxedValue("size", (value.width, value.height))
        if isinstance(value, Rect):
            return BoxedValue("rect", value.to_tuple())
        if isinstance(value, Range):
            return BoxedValue("range", (value.location, value.length))
        raise TypeError(f"Cannot box {type(value).__name__}")

    def system_wide_handle(self) -> Any:
        return MemoryHandle(SYSTEM_WIDE_ID)

    def application_handle(self, pid: int) -> Any:
        self._record("application_handle", pid)
        with self._lock:
            for node_id in self._apps:
                if self._nodes[node_id].pid == pid:
                    return MemoryHandle(node_id)
        raise InvalidHandleError(pid, "no application with this pid")

    def element_at(self, handle: Any, point: Point) -> Optional[Any]:
        """Deepest node whose frame contains ``point``; later siblings are on top."""
        self._record("element_at", handle, point)
        self._node(handle)
        with self._lock:
            roots = list(self._apps) if handle.node_id == SYSTEM_WIDE_ID else [handle.node_id]
            hit: Optional[int] = None
            for root in roots:
                for node_id in self._subtree(root):
                    if node_id in self._invalid:
                        continue
                    frame = self._frame(self._nodes[node_id])
                    if frame is not None and frame.contains(point):
                        hit = node_id
        return MemoryHandle(hit) if hit is not None else None

    def _frame(self, node: MemoryNode) -> Optional[Rect]:
        position = node.attributes.get("AXPosition")
        size = node.attributes.get("AXSize")
        if not (isinstance(position, BoxedValue) and isinstance(size, BoxedValue)):
            return None
        return Rect(_unbox(position), _unbox(size))


def _parse_value(value: Any) -> Any:
    if isinstance(value, dict) and len(value) == 1:
        kind, raw = next(iter(value.items()))
        if kind in BOX_KINDS:
            if not isinstance(raw, list) or len(raw) != _FIELD_COUNTS[kind]:
                raise ConfigError(f"{kind} value needs {_FIELD_COUNTS[kind]} numbers, got {raw!r}")
            return BoxedValue(kind, tuple(raw))
        if kind == "ref":
            return _Ref(str(raw))
    if isinstance(value, list):
        return [_parse_value(v) for v in value]
    return value


def _unbox(raw: BoxedValue) -> Boxed:
    f = raw.fields
    if raw.kind == "point":
        return Point(f[0], f[1])
    if raw.kind == "size":
        return Size(f[0], f[1])
    if raw.kind == "rect":
        return Rect(Point(f[0], f[1]), Size(f[2], f[3]))
    if raw.kind == "range":
        return Range(int(f[0]), int(f[1]))
    raise ValueError(f"Unknown boxed kind: {raw.kind}")
