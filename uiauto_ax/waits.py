# uiauto_ax/waits.py
"""
@file waits.py
@brief Polling waits, notification waits and element waits.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from .config import TimeConfig
from .exceptions import SearchFailure, TimeoutError
from .naming import notification_for
from .timinglogger import TIMING_LOGGER

T = TypeVar("T")


def _now() -> float:
    """Monotonic time source for timeout calculations."""
    return time.monotonic()


def _set_timeout_metadata(
    error: TimeoutError,
    *,
    description: str,
    timeout: float,
    attempt_count: int,
    elapsed: float,
) -> None:
    error.description = description
    error.timeout = timeout
    error.attempt_count = attempt_count
    error.elapsed_time = elapsed


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
) -> T:
    """
    Repeatedly run ``predicate`` until it returns a truthy value or the
    timeout elapses.

    Exceptions raised by the predicate count as a falsy result; the last one
    is kept on the TimeoutError as ``original_exception``.
    """
    start_time = _now()
    last_exception: Optional[BaseException] = None
    attempt_count = 0

    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="wait_start",
            description=description,
            metadata={"timeout_s": timeout, "interval_s": interval},
        )

    while True:
        attempt_count += 1
        elapsed = _now() - start_time

        if elapsed >= timeout:
            break

        try:
            result = predicate()
            if result:
                if TIMING_LOGGER.is_enabled():
                    TIMING_LOGGER.log(
                        event="wait_success",
                        description=description,
                        status="success",
                        metadata={
                            "attempts": attempt_count,
                            "elapsed_s": round(_now() - start_time, 3),
                        },
                    )
                return result
        except Exception as e:
            last_exception = e

        time_left = timeout - elapsed
        sleep_time = min(interval, time_left) if time_left > 0 else 0
        if sleep_time > 0:
            time.sleep(sleep_time)

    elapsed = _now() - start_time
    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="wait_timeout",
            description=description,
            status="error",
            metadata={
                "timeout_s": timeout,
                "attempts": attempt_count,
                "elapsed_s": round(elapsed, 3),
            },
        )

    if last_exception:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s: "
            f"{type(last_exception).__name__}: {last_exception}"
        )
    else:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s "
            f"(condition kept returning falsy)"
        )
    error.original_exception = last_exception
    _set_timeout_metadata(
        error,
        description=description,
        timeout=timeout,
        attempt_count=attempt_count,
        elapsed=elapsed,
    )
    raise error


def wait_until_passes(
    func: Callable[..., T],
    timeout: float,
    interval: float = 0.2,
    exceptions: Tuple[type, ...] = (Exception,),
    description: str = "operation",
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Wait until ``func(*args, **kwargs)`` returns without raising one of
    ``exceptions``. Other exceptions propagate immediately.
    """
    start_time = _now()
    attempt_count = 0

    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="retry_start",
            description=description,
            metadata={"timeout_s": timeout, "interval_s": interval},
        )

    while True:
        attempt_count += 1
        try:
            result = func(*args, **kwargs)
            if TIMING_LOGGER.is_enabled():
                TIMING_LOGGER.log(
                    event="retry_success",
                    description=description,
                    status="success",
                    metadata={
                        "attempts": attempt_count,
                        "elapsed_s": round(_now() - start_time, 3),
                    },
                )
            return result
        except exceptions as e:
            elapsed = _now() - start_time
            time_left = timeout - elapsed

            if time_left <= 0:
                if TIMING_LOGGER.is_enabled():
                    TIMING_LOGGER.log(
                        event="retry_timeout",
                        description=description,
                        status="error",
                        metadata={
                            "attempts": attempt_count,
                            "elapsed_s": round(elapsed, 3),
                        },
                    )
                error = TimeoutError(
                    f"Timed out waiting for {description} after {timeout}s "
                    f"({attempt_count} attempts). "
                    f"Last error: {type(e).__name__}: {e}"
                )
                error.original_exception = e
                _set_timeout_metadata(
                    error,
                    description=description,
                    timeout=timeout,
                    attempt_count=attempt_count,
                    elapsed=elapsed,
                )
                raise error from e

            sleep_time = min(interval, time_left)
            if TIMING_LOGGER.is_enabled():
                TIMING_LOGGER.log(
                    event="retry_wait",
                    description=description,
                    metadata={"attempt": attempt_count, "sleep_s": round(sleep_time, 3)},
                )
            time.sleep(sleep_time)


def wait_for_notification(
    element: Any,
    name: Any,
    timeout: Optional[float] = None,
    predicate: Optional[Callable[[Any, str], bool]] = None,
) -> Any:
    """
    Block until ``element`` posts the notification ``name``.

    Each delivery is offered to ``predicate(element, notification)``; a
    declined delivery leaves the wait running, so unrelated firings are
    filtered out. A predicate that raises counts as declining; the last such
    exception is kept on the TimeoutError as ``original_exception``. The
    subscription is always removed before returning.

    @param element Element to observe
    @param name Symbolic or canonical notification name
    @param timeout Seconds to wait; the ``notification_timeout`` setting if None
    @param predicate Decides whether a delivery satisfies the wait
    @return The element carried by the accepted delivery
    @throws TimeoutError if no delivery was accepted in time
    """
    if timeout is None:
        timeout = TimeConfig.current().notification_timeout
    notification = notification_for(name)
    description = f"notification {notification}"
    accepted = threading.Event()
    received: Dict[str, Any] = {"deliveries": 0, "error": None}

    def handler(sender: Any, delivered: str) -> bool:
        received["deliveries"] += 1
        try:
            ok = True if predicate is None else bool(predicate(sender, delivered))
        except Exception as e:
            received["error"] = e
            ok = False
        if TIMING_LOGGER.is_enabled():
            TIMING_LOGGER.log(
                event="notification_received",
                description=delivered,
                metadata={"accepted": ok},
            )
        if ok and not accepted.is_set():
            received["element"] = sender
            accepted.set()
        return ok

    start_time = _now()
    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="wait_start",
            description=description,
            metadata={"timeout_s": timeout},
        )

    subscription = element.on_notification(notification, handler)
    try:
        done = accepted.wait(timeout)
    finally:
        element.service.unregister_notification(subscription)
    elapsed = _now() - start_time

    if done:
        if TIMING_LOGGER.is_enabled():
            TIMING_LOGGER.log(
                event="wait_success",
                description=description,
                status="success",
                metadata={
                    "deliveries": received["deliveries"],
                    "elapsed_s": round(elapsed, 3),
                },
            )
        return received["element"]

    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="wait_timeout",
            description=description,
            status="error",
            metadata={
                "timeout_s": timeout,
                "deliveries": received["deliveries"],
                "elapsed_s": round(elapsed, 3),
            },
        )

    last_exception = received["error"]
    if last_exception is not None:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s: "
            f"{type(last_exception).__name__}: {last_exception}"
        )
    else:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s "
            f"({received['deliveries']} deliveries declined)"
        )
    error.original_exception = last_exception
    _set_timeout_metadata(
        error,
        description=description,
        timeout=timeout,
        attempt_count=received["deliveries"],
        elapsed=elapsed,
    )
    raise error


def wait_for_element(
    root: Any,
    element_type: Any,
    filters: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
    interval: Optional[float] = None,
) -> Any:
    """
    Poll a search under ``root`` until it succeeds.

    A singular type waits for one element, a plural one for a non-empty
    list. Service errors are not retried.
    """
    setting = TimeConfig.current().element_wait
    timeout = setting.timeout if timeout is None else timeout
    interval = setting.interval if interval is None else interval
    filters = dict(filters or {})

    def attempt() -> Any:
        found = root.search(element_type, filters)
        if isinstance(found, list) and not found:
            raise SearchFailure(root, element_type, filters)
        return found

    return wait_until_passes(
        attempt,
        timeout,
        interval,
        (SearchFailure,),
        f"element {element_type}",
    )
