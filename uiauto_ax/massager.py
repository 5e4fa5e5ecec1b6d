# uiauto_ax/massager.py
"""
@file massager.py
@brief Turns raw service values into usable Python values and back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List

from .naming import strip_prefix
from .roles import ROLES
from .values import is_boxed_struct

if TYPE_CHECKING:
    from .element import Element
    from .interfaces import IHandleService


def process(service: IHandleService, value: Any) -> Any:
    """
    Massage a raw value coming back from the service.

    Node handles become Element proxies of the class matching their role,
    boxed geometry/range values become plain structs, sequences are
    processed when their first item needs it, everything else passes
    through unchanged.
    """
    if value is None:
        return None
    if service.is_handle(value):
        return process_element(service, value)
    if service.is_boxed(value):
        return service.unbox(value)
    if isinstance(value, (list, tuple)):
        return process_array(service, value)
    return value


def process_element(service: IHandleService, handle: Any) -> Element:
    """Wrap a handle in a proxy whose class is chosen from its role chain."""
    roles = [strip_prefix(role) for role in service.role_of(handle)]
    return ROLES.resolve(roles)(handle, service)


def process_array(service: IHandleService, values: Any) -> List[Any]:
    """Sequences are assumed homogeneous; only the first item is inspected."""
    if not values:
        return list(values)
    first = values[0]
    if not (service.is_handle(first) or service.is_boxed(first)):
        return list(values)
    return [process(service, v) for v in values]


def to_wire(service: IHandleService, value: Any) -> Any:
    """Box structs the service cannot take as-is; other values are unchanged."""
    if is_boxed_struct(value):
        return service.box(value)
    return value
