# uiauto_ax/session.py
"""
@file session.py
@brief Engine session: a service bound to the loaded settings.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .config import TimeConfig
from .element import Application, Element, SystemWide
from .interfaces import IHandleService
from .massager import process_element
from .settings import EngineSettings
from .values import Point


class AXSession:
    """
    Binds a Node Handle Service to the engine's configuration and hands out
    the root elements (system-wide, per application) callers start from.
    """

    def __init__(
        self,
        service: IHandleService,
        settings: Optional[EngineSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.service = service
        self.settings = settings
        self.log = logger or logging.getLogger("uiauto_ax.session")
        self.config = settings.apply() if settings is not None else TimeConfig.current()
        self._system_wide: Optional[SystemWide] = None

        if self.config.messaging_timeout > 0:
            self.set_global_timeout(self.config.messaging_timeout)

    def system_wide(self) -> SystemWide:
        if self._system_wide is None:
            self._system_wide = SystemWide.for_service(self.service)
        return self._system_wide

    def application(self, pid: int) -> Application:
        """Root element of the application with process id ``pid``."""
        handle = self.service.application_handle(pid)
        self.log.debug("Application handle for pid=%s: %r", pid, handle)
        return process_element(self.service, handle)

    def element(self, handle: Any) -> Element:
        """Proxy for an arbitrary handle of this service."""
        return process_element(self.service, handle)

    def element_at(self, point: Point) -> Optional[Element]:
        return self.system_wide().element_at(point)

    def set_global_timeout(self, seconds: float) -> float:
        self.log.info("Setting messaging timeout to %ss", seconds)
        return self.system_wide().set_global_timeout(seconds)
