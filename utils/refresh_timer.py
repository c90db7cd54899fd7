import asyncio
import inspect
import logging

from .errors import ConfigurationError


logger = logging.getLogger(__name__)

REFRESH_INTERVAL_MS = 30_000


class RefreshTimer:
    """Run a callback now and then on a fixed period until stopped.

    Ticks are fire-and-forget: when the callback returns an awaitable it is
    scheduled as a task and the next tick is armed without waiting for it, so
    slow callbacks may overlap. Failures are logged and never stop the timer.
    """

    def __init__(self, interval_ms: int = REFRESH_INTERVAL_MS):
        if interval_ms is None or interval_ms <= 0:
            raise ConfigurationError(f"Refresh interval must be positive, got {interval_ms!r}")
        self.interval_ms = interval_ms
        self._callback = None
        self._handle = None
        self._next_run = None
        self._in_flight = set()

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def in_flight(self):
        """Tasks started by ticks that have not finished yet."""
        return set(self._in_flight)

    def start(self, callback) -> None:
        self.stop()

        loop = asyncio.get_running_loop()
        self._callback = callback
        self._next_run = loop.time()

        # Execute immediately
        self._fire()
        self._arm(loop)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            self._callback = None

    def _arm(self, loop):
        period = self.interval_ms / 1000
        self._next_run += period
        now = loop.time()
        if self._next_run <= now:
            # loop stalled past one or more slots; skip them instead of bursting
            missed = (now - self._next_run) // period + 1
            self._next_run += missed * period
        self._handle = loop.call_at(self._next_run, self._tick)

    def _tick(self):
        handle = self._handle
        if handle is None:
            return
        self._fire()
        # the callback may have stopped or restarted the timer
        if self._handle is handle:
            self._arm(asyncio.get_running_loop())

    def _fire(self):
        try:
            result = self._callback()
        except Exception as exc:
            logger.warning("Scheduled refresh failed: %s", exc, exc_info=exc)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._in_flight.add(task)
            task.add_done_callback(self._on_done)

    def _on_done(self, task):
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Scheduled refresh failed: %s", exc, exc_info=exc)
