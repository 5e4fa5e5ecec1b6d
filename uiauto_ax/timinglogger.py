# uiauto_ax/timinglogger.py
"""
@file timinglogger.py
@brief Opt-in timing events for waits and notification waits.

Events are written as single ``key=value`` lines so they can be grepped out
of a CI log; they go through the ``uiauto_ax.timing`` logger and, when
configured, are appended to a separate file as well.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any, Dict, Optional

log = logging.getLogger("uiauto_ax.timing")

_STATUS_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "error": logging.WARNING,
}


class TimingLogger:
    """Thread-safe timing event logger."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._file_path: Optional[str] = None

    def configure(self, *, file_path: Optional[str] = None) -> None:
        with self._lock:
            self._file_path = file_path

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def format(
        self,
        event: str,
        description: Optional[str] = None,
        status: str = "info",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        parts = [
            f"[{status.lower()}]",
            "[timing]",
            f"time={time.strftime('%H:%M:%S')}",
            f"event={event}",
        ]
        if description:
            parts.append(f"description={description}")
        for key, value in (metadata or {}).items():
            parts.append(f"{key}={value}")
        return " ".join(parts)

    def log(
        self,
        *,
        event: str,
        description: Optional[str] = None,
        status: str = "info",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self._enabled:
            return

        line = self.format(event, description, status, metadata)
        log.log(_STATUS_LEVELS.get(status.lower(), logging.INFO), line)

        if self._file_path:
            self._write_file(line)

    def _write_file(self, line: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._file_path)) or ".", exist_ok=True)
            with self._lock, open(self._file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            log.debug("Could not write timing log %s: %s", self._file_path, e)


TIMING_LOGGER = TimingLogger()
