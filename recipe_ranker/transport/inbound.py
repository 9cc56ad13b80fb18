from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator, Mapping, Union

from ..errors import InvalidBody
from ..jsonutil import strict_loads

if TYPE_CHECKING:
    from http.server import BaseHTTPRequestHandler

    from starlette.requests import Request

HeaderValue = Union[str, list[str]]
BodySource = Union[dict, str, bytes, AsyncIterator[bytes], None]

UNKNOWN_CLIENT = "unknown"


def _loads_strict(raw: str | bytes) -> dict[str, Any]:
    try:
        parsed = strict_loads(raw)
    except ValueError as exc:
        raise InvalidBody() from exc
    if not isinstance(parsed, dict):
        raise InvalidBody()
    return parsed


async def read_json_body(body: BodySource) -> dict[str, Any]:
    """
    Normalize any supported body shape into a JSON object.

    - ``dict``: already parsed by the transport, used as is.
    - ``str``/``bytes``: parsed as strict JSON (the empty string is invalid).
    - async byte stream: read to end of input; empty means ``{}``.
    - ``None``: no body at all, treated like an empty stream.

    Raises ``InvalidBody`` instead of leaking ``json`` errors.
    """
    if isinstance(body, dict):
        return body
    if isinstance(body, (str, bytes, bytearray)):
        return _loads_strict(body)
    if body is None:
        return {}

    chunks: list[bytes] = []
    async for chunk in body:
        chunks.append(chunk.encode() if isinstance(chunk, str) else bytes(chunk))
    raw = b"".join(chunks)
    if not raw:
        return {}
    return _loads_strict(raw)


def _first(value: HeaderValue | None) -> str | None:
    if isinstance(value, list):
        return value[0] if value else None
    return value


@dataclass
class InboundRequest:
    method: str | None
    headers: dict[str, HeaderValue] = field(default_factory=dict)
    peer: str | None = None
    body: BodySource = None
    base64_encoded: bool = False

    def __post_init__(self) -> None:
        self.headers = {k.lower(): v for k, v in self.headers.items()}
        if self.method:
            self.method = self.method.upper()

    def header(self, name: str) -> str | None:
        return _first(self.headers.get(name.lower()))

    @property
    def origin(self) -> str | None:
        return self.header("origin") or None

    @property
    def client_key(self) -> str:
        """
        Best-effort client identity for rate limiting.

        Forwarding headers are trusted as sent; behind a proxy that does not
        overwrite them a client can pick its own key.
        """
        forwarded = self.header("x-forwarded-for") or self.header("x-real-ip")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
        return self.peer or UNKNOWN_CLIENT

    async def read_body(self) -> dict[str, Any]:
        body = self.body
        if self.base64_encoded and isinstance(body, str):
            try:
                body = base64.b64decode(body, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise InvalidBody() from exc
        return await read_json_body(body)

    # ── Transport adapters ───────────────────────────────────────────────

    @classmethod
    def from_starlette(cls, request: Request) -> InboundRequest:
        return cls(
            method=request.method,
            headers=dict(request.headers.items()),
            peer=request.client.host if request.client else None,
            body=request.stream(),
        )

    @classmethod
    def from_lambda_event(cls, event: Mapping[str, Any]) -> InboundRequest:
        """API Gateway / Vercel style event (v1 or v2 payload)."""
        context = event.get("requestContext") or {}
        method = event.get("httpMethod") or (context.get("http") or {}).get("method")
        peer = (context.get("identity") or {}).get("sourceIp") or (context.get("http") or {}).get("sourceIp")

        headers: dict[str, HeaderValue] = dict(event.get("headers") or {})
        for name, values in (event.get("multiValueHeaders") or {}).items():
            headers.setdefault(name, list(values))

        return cls(
            method=method,
            headers=headers,
            peer=peer,
            body=event.get("body"),
            base64_encoded=bool(event.get("isBase64Encoded")),
        )

    @classmethod
    def from_http_handler(cls, handler: BaseHTTPRequestHandler) -> InboundRequest:
        try:
            length = int(handler.headers.get("Content-Length") or 0)
        except ValueError:
            length = 0

        async def _stream() -> AsyncIterator[bytes]:
            if length > 0:
                yield handler.rfile.read(length)

        return cls(
            method=handler.command,
            headers=dict(handler.headers.items()),
            peer=handler.client_address[0] if handler.client_address else None,
            body=_stream(),
        )
