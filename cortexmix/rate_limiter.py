"""Token-bucket rate limiter shared by every agent's brain.

The bucket is the only backpressure mechanism in the pipeline. It protects
the shared, costly reasoning endpoint from a crowd of agents without a
queue: an agent that fails ``try_consume`` simply skips this cycle and tries
again on its own cadence.

Usage:
    limiter = RateLimiter(15, 60)  # 15 requests per 60 seconds
    if limiter.try_consume():
        ...

There is no module-level singleton. Build one limiter at startup and inject
it into each Brain so tests can create isolated buckets.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable, Optional

from .config import Config


Clock = Callable[[], float]
"""Zero-argument callable returning monotonic seconds."""


class RateLimiter:
    """Lazily refilled token bucket.

    Tokens refill continuously at ``max_requests / interval`` and are computed
    from elapsed time on each access; no background timer runs.
    """

    def __init__(
        self,
        max_requests: int,
        interval_seconds: float,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be > 0")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._clock: Clock = clock or time.monotonic
        self.max_tokens = float(max_requests)
        self.interval_ms = interval_seconds * 1000.0
        self.refill_rate_per_ms = max_requests / self.interval_ms
        self._tokens = float(max_requests)
        self._last_refill_ms = self._now_ms()
        # Refill and consume must be atomic if hosts update agents from threads
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, *, clock: Optional[Clock] = None) -> "RateLimiter":
        return cls(
            Config.RATE_LIMIT_MAX_REQUESTS,
            Config.RATE_LIMIT_INTERVAL_SECONDS,
            clock=clock,
        )

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def _refill(self) -> None:
        now = self._now_ms()
        elapsed = now - self._last_refill_ms
        # A clock that steps backwards must not drain the bucket
        if elapsed <= 0:
            return
        if elapsed >= self.interval_ms:
            self._tokens = self.max_tokens
        else:
            self._tokens = min(self.max_tokens, self._tokens + elapsed * self.refill_rate_per_ms)
        self._last_refill_ms = now

    def try_consume(self, tokens: float = 1) -> bool:
        """Take ``tokens`` from the bucket if available. Never blocks.

        Raises:
            ValueError: ``tokens`` is not positive
        """
        if tokens <= 0:
            raise ValueError("tokens must be > 0")
        with self._lock:
            self._refill()
            if self._tokens >= tokens:
                self._tokens -= tokens
                return True
            return False

    def get_tokens_remaining(self) -> int:
        """Whole tokens currently available (after refill)."""
        with self._lock:
            self._refill()
            return math.floor(self._tokens)

    def __repr__(self) -> str:
        return (
            f"RateLimiter(max_tokens={self.max_tokens:g}, "
            f"refill_rate_per_ms={self.refill_rate_per_ms:.6f})"
        )
