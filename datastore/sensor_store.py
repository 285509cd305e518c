from __future__ import annotations

import logging
import threading
from functools import lru_cache
from typing import Callable, Dict, Optional, Tuple

from models.records import Reading, StoreSnapshot
from services.generator import ReadingGenerator, sensor_roster
from services.instrumentation import TimingHook, default_timing_hook, noop_timing_hook, timed
from settings import get_settings

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]

MAX_RETAINED = 1000
DEFAULT_SENSOR_COUNT = 5
DEFAULT_TICK_INTERVAL = 2.0

INITIALIZATION_FAILURE_MESSAGE = "Failed to initialize sensor data"
CYCLE_FAILURE_MESSAGE = "Failed to process sensor data update"

logger = logging.getLogger(__name__)


def _already_unsubscribed() -> None:
    return None


class SensorDataStore:
    """Bounded, subscribable history of generated readings.

    The store produces one batch synchronously on construction and then one
    batch per tick on a background thread. Consumers read immutable
    ``StoreSnapshot`` objects; the same object is returned until the next
    mutation, so an identity check is enough to detect change.
    """

    def __init__(
        self,
        generator: Optional[ReadingGenerator] = None,
        *,
        sensor_count: int = DEFAULT_SENSOR_COUNT,
        max_retained: int = MAX_RETAINED,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        timing_hook: TimingHook = noop_timing_hook,
        autostart: bool = True,
        join_timeout: float = 5.0,
    ) -> None:
        if sensor_count <= 0:
            raise ValueError("sensor_count must be positive.")
        if max_retained <= 0:
            raise ValueError("max_retained must be positive.")
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive.")

        self.generator = generator or ReadingGenerator()
        self.roster = sensor_roster(sensor_count)
        self.max_retained = max_retained
        self.tick_interval = tick_interval
        self._timing_hook = timing_hook
        self._join_timeout = join_timeout

        self._history: Tuple[Reading, ...] = ()
        self._is_connected = False
        self._error: Optional[str] = None
        self._cached_snapshot: Optional[StoreSnapshot] = None
        self._listeners: Dict[object, Listener] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._destroyed = False

        self._produce_initial_batch()
        if autostart:
            self.start()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register ``listener`` to be called after every state mutation."""
        token = object()
        with self._lock:
            if self._destroyed:
                return _already_unsubscribed
            self._listeners[token] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(token, None)

        return unsubscribe

    def get_snapshot(self) -> StoreSnapshot:
        with self._lock:
            if self._cached_snapshot is None:
                self._cached_snapshot = StoreSnapshot(
                    data=self._history,
                    is_connected=self._is_connected,
                    error=self._error,
                )
            return self._cached_snapshot

    def start(self) -> None:
        """Start periodic production; calling it on a running store does nothing."""
        with self._lock:
            if self._destroyed:
                raise RuntimeError("Cannot start a destroyed sensor data store.")
            if self._thread is not None:
                return
            self._thread = threading.Thread(
                target=self._run, name="sensor-store-producer", daemon=True
            )
            self._thread.start()
        logger.info(
            "Sensor simulation started",
            extra={"sensor_count": len(self.roster)},
        )

    def run_cycle(self) -> bool:
        """Run one production cycle and notify listeners.

        Returns ``True`` when a batch was stored. A generator fault marks the
        store disconnected and leaves the history untouched; it is never
        raised to the caller.
        """
        if self._destroyed:
            return False

        try:
            batch = self._generate_batch()
        except Exception as exc:
            logger.exception(
                "Sensor data update failed",
                extra={"reason": type(exc).__name__},
            )
            with self._lock:
                if self._destroyed:
                    return False
                self._is_connected = False
                self._error = CYCLE_FAILURE_MESSAGE
                self._cached_snapshot = None
            self._notify()
            return False

        with self._lock:
            if self._destroyed:
                return False
            self._history = (batch + self._history)[: self.max_retained]
            self._is_connected = True
            self._error = None
            self._cached_snapshot = None
            history_size = len(self._history)

        logger.debug(
            "Sensor data updated",
            extra={"sensor_count": len(batch), "history_size": history_size},
        )
        self._notify()
        return True

    def destroy(self) -> None:
        """Stop production and drop all listeners. Safe to call repeatedly."""
        with self._lock:
            if self._destroyed:
                return
            self._destroyed = True
            self._listeners.clear()
            self._cached_snapshot = None
            thread = self._thread

        self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._join_timeout)
        logger.info("Sensor data store destroyed")

    def _produce_initial_batch(self) -> None:
        try:
            batch = self._generate_batch()
        except Exception as exc:
            logger.exception(
                "Initial sensor data generation failed",
                extra={"reason": type(exc).__name__},
            )
            self._is_connected = False
            self._error = INITIALIZATION_FAILURE_MESSAGE
            return

        self._history = batch[: self.max_retained]
        self._is_connected = True
        self._error = None
        logger.info(
            "Initial sensor data generated",
            extra={"history_size": len(self._history)},
        )

    def _generate_batch(self) -> Tuple[Reading, ...]:
        with timed(self._timing_hook, "processing"):
            return tuple(self.generator.generate(sensor_id) for sensor_id in self.roster)

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners.values())

        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception(
                    "Store listener raised during notification",
                    extra={"listener_count": len(listeners)},
                )

    def _run(self) -> None:
        while not self._stop_event.wait(self.tick_interval):
            self.run_cycle()


@lru_cache
def build_default_store() -> SensorDataStore:
    """Factory that wires a running store from the environment settings."""
    settings = get_settings()
    return SensorDataStore(
        sensor_count=settings.sensor_count,
        max_retained=settings.max_retained,
        tick_interval=settings.tick_interval_seconds,
        timing_hook=default_timing_hook(),
    )
