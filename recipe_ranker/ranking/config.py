from __future__ import annotations

from dataclasses import dataclass, field

from ..env import env_int, env_list


@dataclass(frozen=True)
class RateLimitConfig:
    window_ms: int = field(default_factory=lambda: env_int("RATE_LIMIT_WINDOW_MS", 60_000))
    max_requests: int = field(default_factory=lambda: env_int("RATE_LIMIT_MAX", 5))
    max_clients: int = field(default_factory=lambda: env_int("RATE_LIMIT_MAX_CLIENTS", 10_000))


@dataclass(frozen=True)
class OriginConfig:
    # Empty means every origin is allowed.
    allowed_origins: tuple[str, ...] = field(default_factory=lambda: env_list("ALLOWED_ORIGIN"))
