"""Press-and-hold repeat timer."""

import math
from typing import Optional

import structlog

logger = structlog.get_logger()


class PressRepeater:
    """
    Periodic timer that runs while the pointer is held down.

    Driven by the caller's clock: poll() reports how many firings became
    due since the last poll. Start and stop are both idempotent.
    """

    def __init__(self, interval_ms: float = 50.0):
        interval_ms = float(interval_ms)
        if not math.isfinite(interval_ms) or interval_ms <= 0:
            raise ValueError(f"Press interval must be a finite number > 0, got {interval_ms}")
        self.interval_ms = interval_ms
        self._interval_us = round(interval_ms * 1000)
        if self._interval_us < 1:
            raise ValueError(f"Press interval must be at least 1 microsecond, got {interval_ms} ms")
        self._started_at: Optional[float] = None
        self._fired = 0

    @property
    def active(self) -> bool:
        return self._started_at is not None

    def start(self, now: float) -> bool:
        """Start repeating from now (seconds). Returns False if already running."""
        if self.active:
            return False
        self._started_at = float(now)
        self._fired = 0
        logger.debug("Press timer started", interval_ms=self.interval_ms)
        return True

    def stop(self) -> bool:
        """Cancel the timer. Returns False if it was not running."""
        if not self.active:
            return False
        logger.debug("Press timer stopped", fired=self._fired)
        self._started_at = None
        self._fired = 0
        return True

    def poll(self, now: float) -> int:
        """Number of firings due at now that were not reported before."""
        if not self.active:
            return 0

        # Whole microseconds: a poll at an exact multiple of the interval fires
        elapsed_us = round((float(now) - self._started_at) * 1_000_000)
        if elapsed_us <= 0:
            return 0

        total = elapsed_us // self._interval_us
        due = total - self._fired
        if due <= 0:
            return 0
        self._fired = total
        return due
