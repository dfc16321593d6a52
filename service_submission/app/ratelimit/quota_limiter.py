"""
Fixed-window quota limiter for outbound submissions.

At most ``limit`` permits are handed out per ``period``. Permits come
back either when a holder calls ``release()`` or when the window is
replenished, which tops the pool up to capacity once per period.

This is a fixed-window approximation of "N calls per rolling period":
``limit`` calls at the end of one window plus ``limit`` calls right
after the replenishment can pass within a very short interval, so up to
``2 * limit`` calls may cross a window boundary.

All state transitions run synchronously on the owning event loop and
never await in between, so the counter update and the wake-up of a
waiter happen as one step.
"""

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional

from shared.errors import ConfigError, QuotaCancelledError
from shared.logging import get_logger
from shared.metrics import MetricsCollector


_UNIT_SECONDS = {
    "millisecond": 0.001,
    "second": 1.0,
    "minute": 60.0,
    "hour": 3600.0,
    "day": 86400.0,
}


@dataclass(frozen=True)
class RateWindow:
    """At most ``limit`` permits per ``period`` seconds."""

    limit: int
    period: float

    def __post_init__(self):
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1:
            raise ConfigError(
                f"limit must be a positive integer, got {self.limit!r}",
                details={"limit": self.limit}
            )
        if isinstance(self.period, bool) or not isinstance(self.period, (int, float)) or self.period <= 0:
            raise ConfigError(
                f"period must be a positive number of seconds, got {self.period!r}",
                details={"period": self.period}
            )

    @classmethod
    def per(cls, unit: str, limit: int) -> "RateWindow":
        """Build a window of one time unit, e.g. ``RateWindow.per("second", 5)``."""
        key = unit.strip().lower()
        if key.endswith("s"):
            key = key[:-1]
        if key not in _UNIT_SECONDS:
            raise ConfigError(
                f"unknown time unit: {unit!r}",
                details={"unit": unit, "supported": sorted(_UNIT_SECONDS)}
            )
        return cls(limit=limit, period=_UNIT_SECONDS[key])


class QuotaLimiter:
    """Fair, time-windowed permit pool shared by concurrent submitters."""

    def __init__(self, limit: int, period: float, *,
                 name: str = "default",
                 metrics: Optional[MetricsCollector] = None):
        self.window = RateWindow(limit=limit, period=period)
        self.name = name
        self.metrics = metrics
        self.logger = get_logger(f"submission.quota_limiter.{name}")

        self._available = self.window.limit
        self._waiters: Deque[asyncio.Future] = deque()
        self._timer_task: Optional[asyncio.Task] = None
        self._closed = False
        self._replenish_count = 0

    @classmethod
    def from_window(cls, window: RateWindow, **kwargs) -> "QuotaLimiter":
        """Create a limiter for an existing window."""
        return cls(window.limit, window.period, **kwargs)

    @property
    def capacity(self) -> int:
        return self.window.limit

    @property
    def period(self) -> float:
        return self.window.period

    @property
    def available(self) -> int:
        return self._available

    @property
    def waiting(self) -> int:
        """Number of callers currently queued for a permit."""
        return sum(1 for waiter in self._waiters if not waiter.done())

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    async def start(self):
        """Start the replenishment timer. The first replenishment fires after one period."""
        if self._closed:
            raise QuotaCancelledError(f"Quota limiter '{self.name}' is closed")
        self._ensure_timer()

    async def close(self):
        """Stop replenishing and fail every caller still waiting for a permit."""
        if self._closed:
            return
        self._closed = True

        pending = 0
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_exception(QuotaCancelledError(
                    f"Quota limiter '{self.name}' shut down while waiting for a permit"
                ))
                pending += 1

        if self._timer_task:
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
            self._timer_task = None

        self._publish_state()
        self.logger.info("Quota limiter stopped", cancelled_waiters=pending)

    async def __aenter__(self) -> "QuotaLimiter":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def acquire(self):
        """Take one permit, waiting in FIFO order until one is available.

        Raises QuotaCancelledError if the limiter is (or gets) closed. A
        cancelled caller leaves the queue without holding a permit.
        """
        if self._closed:
            raise QuotaCancelledError(f"Quota limiter '{self.name}' is closed")
        self._ensure_timer()

        # Newcomers never overtake queued callers.
        if self._available > 0 and not self._has_waiters():
            self._available -= 1
            self._publish_state()
            self.logger.debug("Acquired permit", available=self._available)
            return

        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        self._waiters.append(waiter)
        self._publish_state()
        started = loop.time()
        self.logger.debug("Waiting for permit", waiting=self.waiting)

        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled() and waiter.exception() is None:
                # Granted just before the cancellation landed: pass it on.
                self._give_back(1)
            else:
                self._discard(waiter)
            raise

        if self.metrics:
            self.metrics.record_acquire_wait(loop.time() - started)
        self.logger.debug("Acquired permit after wait", available=self._available)

    def release(self):
        """Return one permit. Never raises the pool above capacity."""
        self._give_back(1)
        self.logger.debug("Released permit", available=self._available)

    def replenish(self) -> int:
        """Restore the pool to capacity; returns the number of permits restored."""
        deficit = self.capacity - self._available
        if deficit <= 0:
            return 0
        self._give_back(deficit)
        self._replenish_count += 1
        if self.metrics:
            self.metrics.record_replenish(deficit)
        self.logger.debug("Quota window replenished", released=deficit, available=self._available)
        return deficit

    def get_state(self) -> Dict[str, Any]:
        """Get current limiter state."""
        return {
            "name": self.name,
            "limit": self.capacity,
            "period": self.period,
            "available": self._available,
            "waiting": self.waiting,
            "replenish_count": self._replenish_count,
            "running": self.running,
            "closed": self._closed,
        }

    def _give_back(self, permits: int):
        # Queued callers are served before the pool grows.
        while permits > 0 and self._waiters:
            waiter = self._waiters.popleft()
            if waiter.done():
                continue
            waiter.set_result(None)
            permits -= 1
        self._available = min(self.capacity, self._available + permits)
        self._publish_state()

    def _discard(self, waiter: asyncio.Future):
        try:
            self._waiters.remove(waiter)
        except ValueError:
            pass
        # A permit released while this waiter sat cancelled in the queue.
        if self._available > 0 and self._has_waiters():
            granted = min(self._available, self.waiting)
            self._available -= granted
            self._give_back(granted)
        self._publish_state()

    def _has_waiters(self) -> bool:
        return any(not waiter.done() for waiter in self._waiters)

    def _ensure_timer(self):
        if self._timer_task is None or self._timer_task.done():
            self._timer_task = asyncio.get_running_loop().create_task(self._replenish_loop())
            self.logger.info("Quota limiter started", limit=self.capacity, period=self.period)

    async def _replenish_loop(self):
        """Replenish at a fixed rate: firing k happens at start + k * period."""
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while not self._closed:
            deadline += self.period
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            try:
                self.replenish()
            except Exception as e:
                self.logger.error("Error replenishing quota window", error=str(e))

    def _publish_state(self):
        if self.metrics:
            self.metrics.record_quota_state(self._available, self.waiting)
