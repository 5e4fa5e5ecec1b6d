# uiauto_ax/exceptions.py
"""
@file exceptions.py
@brief Exception taxonomy for the accessibility attribute and search engine.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class UIAutoError(Exception):
    """Base exception for the engine."""
    pass


class ConfigError(UIAutoError):
    """Raised when a YAML settings file is invalid."""
    pass


class LookupFailure(UIAutoError, LookupError):
    """
    Raised when an attribute, parameterized attribute or action name does
    not resolve against the names a node reports.

    This is always a caller-input problem and is never retried.
    """

    def __init__(self, name: Any, kind: str = "attribute"):
        self.name = name
        self.kind = kind
        super().__init__(f"{kind} {name!r} was not found")


class ReadOnlyAttribute(UIAutoError):
    """Raised when trying to set an attribute that cannot be written."""

    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"{name!r} is a read only attribute")


class SearchFailure(UIAutoError):
    """
    Raised when a singular (or implicit) search finds nothing.

    Carries the searching element, the requested type token, the rejected
    filters and the rendered element path from the root down to the
    searcher, so a failed query can be diagnosed without re-running it.

    Attributes:
        searcher: Element the search was rooted at
        searchee: Requested element type token
        filters: Filter mapping that was applied
        path: Rendered elements, root first, ending with the searcher
    """

    def __init__(
        self,
        searcher: Any,
        searchee: Any,
        filters: Optional[Dict[str, Any]] = None,
        path: Optional[List[str]] = None,
    ):
        self.searcher = searcher
        self.searchee = searchee
        self.filters = dict(filters or {})
        if path is None:
            from .inspector import render_path
            path = render_path(searcher)
        self.path = path
        super().__init__(self.__str__())

    def __str__(self) -> str:
        pp_filters = ", ".join(f"{key}: {value!r}" for key, value in self.filters.items())
        msg = f"Could not find `{self.searchee}"
        if pp_filters:
            msg += f"({pp_filters})"
        msg += f"` as a child of {type(self.searcher).__name__}"
        lines = [msg, "Element Path:"]
        lines.extend(f"\t{entry}" for entry in self.path)
        return "\n".join(lines)


class ServiceError(UIAutoError):
    """
    Raised by a Node Handle Service when the platform reports a failure
    (invalid handle, timeout, permission denial).

    The engine never swallows these; they reach the caller unchanged.
    """
    pass


class InvalidHandleError(ServiceError):
    """Raised when a handle no longer refers to a live node."""

    def __init__(self, handle: Any, message: Optional[str] = None):
        self.handle = handle
        msg = f"Handle {handle!r} is invalid"
        if message:
            msg += f": {message}"
        super().__init__(msg)


class ServiceTimeoutError(ServiceError):
    """Raised when a round trip to the owning application times out."""

    def __init__(self, handle: Any, timeout: Optional[float] = None):
        self.handle = handle
        self.timeout = timeout
        msg = f"Messaging timeout talking to {handle!r}"
        if timeout is not None:
            msg += f" after {timeout}s"
        super().__init__(msg)


class TimeoutError(UIAutoError):
    """
    Raised when a wait/retry times out.

    This exception preserves the original exception that caused the timeout,
    making debugging significantly easier.

    Attributes:
        original_exception: The last exception that was raised before timeout
        description: Human-readable description of what was being waited for
        timeout: The timeout value in seconds
        attempt_count: Number of attempts made (if applicable)
        elapsed_time: Actual elapsed time in seconds (if applicable)
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.timeout: Optional[float] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None

    def __str__(self) -> str:
        base_msg = super().__str__()

        details = []
        if self.original_exception is not None:
            details.append(f"Original exception: {type(self.original_exception).__name__}")
        if self.attempt_count is not None:
            details.append(f"Attempts: {self.attempt_count}")
        if self.elapsed_time is not None:
            details.append(f"Elapsed: {self.elapsed_time:.2f}s")

        if details:
            return f"{base_msg} [{', '.join(details)}]"
        return base_msg

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        @return The deepest original_exception in the chain, or None
        """
        current = self.original_exception
        while current is not None:
            nested = getattr(current, "original_exception", None)
            if nested is None:
                return current
            current = nested
        return None

    def get_traceback_str(self) -> str:
        """
        Get a formatted traceback string from the original exception.

        @return Formatted traceback string or empty string if no original exception
        """
        if self.original_exception is None:
            return ""

        import traceback
        return "".join(traceback.format_exception(
            type(self.original_exception),
            self.original_exception,
            self.original_exception.__traceback__
        ))
