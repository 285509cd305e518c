"""Optional elapsed-time hooks wrapped around production and query work."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from settings import get_settings

TimingHook = Callable[[str, float], None]

logger = logging.getLogger(__name__)


def noop_timing_hook(operation: str, elapsed_ms: float) -> None:
    return None


class LoggingTimingHook:
    """Hook that reports every measurement at DEBUG level."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def __call__(self, operation: str, elapsed_ms: float) -> None:
        self._log.debug(
            "Operation timed",
            extra={"operation": operation, "elapsed_ms": elapsed_ms},
        )


def default_timing_hook() -> TimingHook:
    """Logging hook when ``SENSOR_TIMING_LOG`` is enabled, otherwise a no-op."""
    if get_settings().timing_log:
        return LoggingTimingHook()
    return noop_timing_hook


@contextmanager
def timed(hook: TimingHook, operation: str) -> Iterator[None]:
    """Report the wall time of the ``with`` body to ``hook`` in milliseconds.

    A failing hook is logged and never affects the outcome of the body.
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        try:
            hook(operation, elapsed_ms)
        except Exception:
            logger.exception("Timing hook failed", extra={"operation": operation})
