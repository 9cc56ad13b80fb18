"""
In-memory sliding-window-log rate limiter.

Each client key keeps the raw admission timestamps (milliseconds) that are
still inside the trailing window.  Expired timestamps are pruned lazily when
the key is evaluated.  State is process-local: several instances behind a load
balancer each enforce their own budget.
"""
from __future__ import annotations

import math
import threading
import time
from collections import OrderedDict

from .config import RateLimitConfig


def now_ms() -> int:
    return int(time.time() * 1000)


class SlidingWindowRateLimiter:
    def __init__(self, config: RateLimitConfig | None = None) -> None:
        self.config = config or RateLimitConfig()
        self._log: OrderedDict[str, list[int]] = OrderedDict()
        self._lock = threading.RLock()

    def _recent(self, client_key: str, now: int) -> list[int]:
        window = self.config.window_ms
        return [ts for ts in self._log.get(client_key, []) if now - ts < window]

    def admit(self, client_key: str, now: int) -> bool:
        """Record an admission for *client_key* at *now*, or refuse it."""
        with self._lock:
            recent = self._recent(client_key, now)
            if len(recent) >= self.config.max_requests:
                self._store(client_key, recent, now)
                return False
            recent.append(now)
            self._store(client_key, recent, now)
            return True

    def retry_after_seconds(self, client_key: str, now: int) -> int:
        """Seconds until the oldest logged admission leaves the window."""
        with self._lock:
            recent = self._recent(client_key, now)
        if len(recent) < self.config.max_requests:
            return 0
        if not recent:
            # Non-positive ceiling: nothing will expire to free a slot.
            return max(1, math.ceil(self.config.window_ms / 1000))
        remaining_ms = recent[0] + self.config.window_ms - now
        return max(1, math.ceil(remaining_ms / 1000))

    def sweep(self, now: int) -> int:
        """Drop keys whose newest timestamp predates the window."""
        window = self.config.window_ms
        with self._lock:
            stale = [key for key, stamps in self._log.items() if not stamps or now - stamps[-1] >= window]
            for key in stale:
                del self._log[key]
        return len(stale)

    def _store(self, client_key: str, stamps: list[int], now: int) -> None:
        if client_key in self._log:
            self._log[client_key] = stamps
            self._log.move_to_end(client_key)
            return
        if len(self._log) >= self.config.max_clients:
            self.sweep(now)
            while len(self._log) >= self.config.max_clients:
                self._log.popitem(last=False)
        self._log[client_key] = stamps

    def __len__(self) -> int:
        return len(self._log)
