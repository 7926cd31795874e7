"""
Cool-down breaker for the upstream rate limit.

Opens after repeated rate-limit notices so cache misses fail fast instead of
spending daily quota while the per-minute window is exhausted. Once the
cool-down elapses a single probe is let through; its outcome decides whether
the breaker closes or cools down again. A probe that never reports back is
given up on after another cool-down period.
"""
from __future__ import annotations

import time
from enum import Enum
from threading import Lock
from typing import Callable


class CircuitState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class UpstreamCircuitBreaker:
    def __init__(
        self,
        failure_threshold: int = 1,
        recovery_timeout_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout_seconds = recovery_timeout_seconds
        self.clock = clock
        self._state = CircuitState.CLOSED
        self._consecutive_rate_limits = 0
        self._rate_limit_total = 0
        self._cooldown_until: float | None = None
        self._probe_started_at: float | None = None
        self._lock = Lock()

    def can_execute(self) -> bool:
        now = self.clock()
        with self._lock:
            if self._state == CircuitState.CLOSED:
                return True
            if self._state == CircuitState.OPEN:
                if now < self._cooldown_until:
                    return False
                self._state = CircuitState.HALF_OPEN
                self._probe_started_at = now
                return True
            # HALF_OPEN: one probe in flight; replace it if it went silent.
            if now - self._probe_started_at >= self.recovery_timeout_seconds:
                self._probe_started_at = now
                return True
            return False

    def record_success(self):
        """Upstream answered without a rate-limit notice."""
        with self._lock:
            self._state = CircuitState.CLOSED
            self._consecutive_rate_limits = 0
            self._cooldown_until = None
            self._probe_started_at = None

    def record_failure(self):
        """Upstream reported a rate limit."""
        now = self.clock()
        with self._lock:
            self._consecutive_rate_limits += 1
            self._rate_limit_total += 1
            if self._state == CircuitState.HALF_OPEN or self._consecutive_rate_limits >= self.failure_threshold:
                self._open(now)

    def record_inconclusive(self):
        """The call failed before upstream could say anything about the rate limit."""
        now = self.clock()
        with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._open(now)

    def _open(self, now: float):
        self._state = CircuitState.OPEN
        self._cooldown_until = now + self.recovery_timeout_seconds
        self._probe_started_at = None

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    def snapshot(self) -> dict[str, int | float | str | None]:
        with self._lock:
            return {
                "state": self._state.value,
                "consecutive_rate_limits": self._consecutive_rate_limits,
                "rate_limit_total": self._rate_limit_total,
                "cooldown_until": self._cooldown_until,
            }
