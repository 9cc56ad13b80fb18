from __future__ import annotations

from typing import Any


class RankingError(Exception):
    """A terminal pipeline failure that maps onto a JSON error reply."""

    status_code: int = 500
    message: str = "Unable to complete ranking request."

    def __init__(
        self,
        message: str | None = None,
        *,
        details: str | None = None,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        self.headers = dict(headers or {})
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


# ── Request-side failures ────────────────────────────────────────────────


class OriginRejected(RankingError):
    status_code = 403
    message = "Origin not allowed."


class MethodNotAllowed(RankingError):
    status_code = 405
    message = "Method not allowed. Use POST."


class RateLimited(RankingError):
    status_code = 429
    message = "Rate limit exceeded. Please wait a moment and try again."


class InvalidBody(RankingError):
    status_code = 400
    message = "Invalid JSON body."


class MissingQuery(RankingError):
    status_code = 400
    message = "Query is required."


class ServerMisconfigured(RankingError):
    status_code = 500
    message = "Server misconfiguration: missing LLM API key."


# ── Upstream failures ────────────────────────────────────────────────────


class UpstreamError(RankingError):
    """Non-success upstream status, relayed with the upstream's own code."""

    message = "LLM API error."

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(details=body, status_code=status_code)


class UpstreamEmpty(RankingError):
    status_code = 502
    message = "LLM returned an empty response."


class UpstreamUnparsable(RankingError):
    status_code = 502
    message = "Unable to parse LLM ranking response."


class UpstreamMalformed(RankingError):
    status_code = 502
    message = "LLM returned unexpected data."


class UnhandledFailure(RankingError):
    status_code = 500
    message = "Unable to complete ranking request."
