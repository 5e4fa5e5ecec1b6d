# uiauto_ax/__init__.py
"""
uiauto-ax - attribute resolution and hierarchical search over accessibility trees.

This package provides:
- Element: name-resolving proxy over an opaque node handle
- RoleRegistry: role taxonomy grown lazily as roles are discovered
- BreadthFirst / DepthFirst: lazy tree traversals
- search: type and filter search with singular/plural inference
- Waits: polling, notification and element waits
- AXSession: entry point binding a Node Handle Service and settings
"""

from uiauto_ax.element import Application, Element, SystemWide
from uiauto_ax.roles import ROLES, RoleRegistry
from uiauto_ax.enumerators import BreadthFirst, DepthFirst
from uiauto_ax.search import Search, SearchResult, search
from uiauto_ax.values import Point, Range, Rect, Size
from uiauto_ax.config import TimeConfig
from uiauto_ax.settings import EngineSettings
from uiauto_ax.session import AXSession
from uiauto_ax.waits import wait_for_element, wait_for_notification, wait_until, wait_until_passes
from uiauto_ax.exceptions import (
    UIAutoError,
    ConfigError,
    LookupFailure,
    ReadOnlyAttribute,
    SearchFailure,
    ServiceError,
    InvalidHandleError,
    ServiceTimeoutError,
    TimeoutError,
)
from uiauto_ax.interfaces import IHandleService

__version__ = "1.0.0"

__all__ = [
    "Element",
    "Application",
    "SystemWide",
    "ROLES",
    "RoleRegistry",
    "BreadthFirst",
    "DepthFirst",
    "Search",
    "SearchResult",
    "search",
    "Point",
    "Size",
    "Rect",
    "Range",
    "TimeConfig",
    "EngineSettings",
    "AXSession",
    "wait_until",
    "wait_until_passes",
    "wait_for_notification",
    "wait_for_element",
    "UIAutoError",
    "ConfigError",
    "LookupFailure",
    "ReadOnlyAttribute",
    "SearchFailure",
    "ServiceError",
    "InvalidHandleError",
    "ServiceTimeoutError",
    "TimeoutError",
    "IHandleService",
]
