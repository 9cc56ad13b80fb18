from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from fastapi.responses import JSONResponse, Response

if TYPE_CHECKING:
    from http.server import BaseHTTPRequestHandler

JSON_CONTENT_TYPE = "application/json"


@dataclass
class Reply:
    status_code: int
    payload: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def no_content(cls, headers: dict[str, str] | None = None) -> Reply:
        return cls(status_code=204, payload=None, headers=dict(headers or {}))

    def encode(self) -> bytes:
        if self.payload is None:
            return b""
        return json.dumps(self.payload, ensure_ascii=False).encode("utf-8")


# ── Emitters, one per reply-object shape ─────────────────────────────────


def to_response(reply: Reply) -> Response:
    """Starlette/FastAPI response object."""
    if reply.payload is None:
        return Response(status_code=reply.status_code, headers=reply.headers)
    return JSONResponse(content=reply.payload, status_code=reply.status_code, headers=reply.headers)


def to_lambda_result(reply: Reply) -> dict[str, Any]:
    """API Gateway / Vercel style ``{statusCode, headers, body}`` result."""
    headers = dict(reply.headers)
    if reply.payload is not None:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    return {
        "statusCode": reply.status_code,
        "headers": headers,
        "body": reply.encode().decode("utf-8"),
    }


def write_to_handler(reply: Reply, handler: BaseHTTPRequestHandler) -> None:
    """Write status, headers and body through an ``http.server`` handler."""
    body = reply.encode()
    handler.send_response(reply.status_code)
    for key, value in reply.headers.items():
        handler.send_header(key, value)
    if reply.payload is not None:
        handler.send_header("Content-Type", JSON_CONTENT_TYPE)
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    if body:
        handler.wfile.write(body)
