"""Single-session stopwatch with an optional countdown limit."""

import math
import time
from typing import Callable, Optional


class GameTimer:
    """
    Stopwatch for the daily puzzle.

    Elapsed time is always derived from `start_time` and the clock, so tick
    handlers only read it. Pausing freezes elapsed at a whole second and
    resuming rebases `start_time` so the count continues without a jump.
    A timer created with `enabled=False` (creative and co-op) ignores every
    call and always reports zero.
    """

    def __init__(
        self,
        time_limit: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True,
    ):
        self.time_limit = time_limit
        self.enabled = enabled
        self._clock = clock
        self.start_time: Optional[float] = None
        self.paused_at: Optional[int] = None
        self._stopped_at: Optional[int] = None

    @property
    def has_started(self) -> bool:
        return self.start_time is not None

    @property
    def is_paused(self) -> bool:
        return self.paused_at is not None

    @property
    def is_running(self) -> bool:
        return self.enabled and self.has_started and not self.is_paused and self._stopped_at is None

    @property
    def elapsed(self) -> int:
        if not self.enabled or not self.has_started:
            return 0
        if self._stopped_at is not None:
            return self._stopped_at
        if self.paused_at is not None:
            return self.paused_at
        return max(0, math.floor(self._clock() - self.start_time))

    @property
    def remaining(self) -> Optional[int]:
        if self.time_limit is None:
            return None
        return max(0, self.time_limit - self.elapsed)

    @property
    def is_expired(self) -> bool:
        return self.is_running and self.remaining == 0

    def start(self, elapsed: int = 0) -> None:
        """Start counting, optionally continuing from a persisted elapsed value."""
        if not self.enabled:
            return
        self.start_time = self._clock() - elapsed
        self.paused_at = None
        self._stopped_at = None

    def pause(self) -> Optional[int]:
        """Freeze elapsed. Returns the frozen value, or None if nothing changed."""
        if not self.is_running:
            return None
        self.paused_at = self.elapsed
        return self.paused_at

    def resume(self) -> bool:
        if not self.enabled or not self.is_paused or self._stopped_at is not None:
            return False
        self.start_time = self._clock() - self.paused_at
        self.paused_at = None
        return True

    def stop(self) -> int:
        """Freeze the final value (completion or game over)."""
        if self.enabled and self.has_started and self._stopped_at is None:
            self._stopped_at = self.elapsed
        return self.elapsed

    def reset(self) -> None:
        self.start_time = None
        self.paused_at = None
        self._stopped_at = None
