from __future__ import annotations

from ..errors import OriginRejected
from .config import OriginConfig

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


class OriginGuard:
    def __init__(self, config: OriginConfig | None = None) -> None:
        self.allowed_origins = frozenset((config or OriginConfig()).allowed_origins)

    def is_allowed(self, origin: str | None) -> bool:
        if not origin or not self.allowed_origins:
            return True
        return origin in self.allowed_origins

    def check(self, origin: str | None) -> dict[str, str]:
        """
        Admit or reject a request origin.

        Returns the CORS headers to attach to every reply for this request
        (none when the request carries no ``Origin``). Raises
        ``OriginRejected`` for origins outside a non-empty allow-list.
        """
        if not self.is_allowed(origin):
            raise OriginRejected()
        if not origin:
            return {}
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
            "Vary": "Origin",
        }
