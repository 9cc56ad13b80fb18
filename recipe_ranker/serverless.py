"""
Function-style entry points for serverless platforms.

``lambda_handler`` serves API Gateway / Vercel events; ``handler`` is the
``BaseHTTPRequestHandler`` class the Vercel Python runtime (and plain
``http.server``) expects. Both share one process-wide ``RankingService`` so a
warm instance keeps its rate-limit window between invocations.
"""
from __future__ import annotations

import asyncio
from http.server import BaseHTTPRequestHandler
from typing import Any, Mapping

from .ranking.service import RankingService
from .transport.inbound import InboundRequest
from .transport.replies import to_lambda_result, write_to_handler

_service: RankingService | None = None


def get_service() -> RankingService:
    global _service
    if _service is None:
        _service = RankingService()
    return _service


def lambda_handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    reply = asyncio.run(get_service().handle(InboundRequest.from_lambda_event(event)))
    return to_lambda_result(reply)


class handler(BaseHTTPRequestHandler):
    def _dispatch(self) -> None:
        reply = asyncio.run(get_service().handle(InboundRequest.from_http_handler(self)))
        write_to_handler(reply, self)

    do_GET = _dispatch
    do_POST = _dispatch
    do_PUT = _dispatch
    do_PATCH = _dispatch
    do_DELETE = _dispatch
    do_OPTIONS = _dispatch
    do_HEAD = _dispatch
