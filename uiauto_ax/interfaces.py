"""
@file interfaces.py
@brief Abstract contract for the Node Handle Service the engine talks to.

The engine never talks to a platform accessibility API directly. Everything
it needs goes through an IHandleService implementation: role and name-set
discovery, attribute reads and writes, actions, notifications and the
boxing of geometry values. Each call is a blocking round trip.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from .values import Boxed, Point

NotificationCallback = Callable[[Any, str], bool]


class IHandleService(ABC):
    """
    Abstract Node Handle Service.

    Handles are opaque to the engine; implementations must make two handles
    that refer to the same node compare equal and hash equally.
    """

    # ---- discovery -------------------------------------------------------

    @abstractmethod
    def role_of(self, handle: Any) -> List[str]:
        """
        Role names for a node, most specific first.

        Args:
            handle: Node handle

        Returns:
            e.g. ["AXCloseButton", "AXButton"]; empty if the node has no role
        """
        pass

    @abstractmethod
    def attribute_names(self, handle: Any) -> List[str]:
        """Ordered attribute identifiers the node currently supports."""
        pass

    @abstractmethod
    def action_names(self, handle: Any) -> List[str]:
        """Ordered action identifiers the node currently supports."""
        pass

    @abstractmethod
    def param_attribute_names(self, handle: Any) -> List[str]:
        """Ordered parameterized attribute identifiers."""
        pass

    # ---- attributes ------------------------------------------------------

    @abstractmethod
    def read_attribute(self, handle: Any, attribute: str) -> Any:
        """
        Read a raw attribute value.

        Returns:
            Raw value, or None when the node has no value for it
        """
        pass

    @abstractmethod
    def read_param_attribute(self, handle: Any, attribute: str, param: Any) -> Any:
        """Read a raw parameterized attribute value (None if no value)."""
        pass

    @abstractmethod
    def attribute_writable(self, handle: Any, attribute: str) -> bool:
        pass

    @abstractmethod
    def write_attribute(self, handle: Any, attribute: str, value: Any) -> bool:
        """Write an already boxed value. Returns True on success."""
        pass

    # ---- actions and notifications ---------------------------------------

    @abstractmethod
    def perform_action(self, handle: Any, action: str) -> bool:
        pass

    @abstractmethod
    def register_notification(
        self, handle: Any, notification: str, callback: NotificationCallback
    ) -> Any:
        """
        Register a callback for a named notification on a node.

        The callback receives the raw handle of the node that posted the
        notification and the notification name, and returns True when the
        delivery is the one the caller was waiting for.

        Returns:
            Opaque subscription token
        """
        pass

    @abstractmethod
    def unregister_notification(self, subscription: Any) -> None:
        pass

    # ---- process and messaging -------------------------------------------

    @abstractmethod
    def pid_of(self, handle: Any) -> int:
        pass

    @abstractmethod
    def set_timeout(self, handle: Any, seconds: float) -> None:
        """
        Set the messaging timeout. On the system-wide handle this is the
        global timeout applied to every subsequent round trip.
        """
        pass

    # ---- value boxing ----------------------------------------------------

    @abstractmethod
    def is_handle(self, raw: Any) -> bool:
        pass

    @abstractmethod
    def is_boxed(self, raw: Any) -> bool:
        pass

    @abstractmethod
    def unbox(self, raw: Any) -> Boxed:
        """Convert a boxed wire value into a Point/Size/Rect/Range."""
        pass

    @abstractmethod
    def box(self, value: Boxed) -> Any:
        """Convert a Point/Size/Rect/Range into the wire representation."""
        pass

    # ---- derived handles -------------------------------------------------

    @abstractmethod
    def system_wide_handle(self) -> Any:
        pass

    @abstractmethod
    def application_handle(self, pid: int) -> Any:
        pass

    @abstractmethod
    def element_at(self, handle: Any, point: Point) -> Optional[Any]:
        """Topmost node at a screen point, or None if there is nothing there."""
        pass
