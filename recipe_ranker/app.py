from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .env import env_str
from .ranking.service import RankingService
from .transport.inbound import InboundRequest
from .transport.replies import to_response

logging.basicConfig(
    level=env_str("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Recipe Ranking API", version="1.0.0")

_service = RankingService()


def get_service() -> RankingService:
    return _service


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


# ── Ranking endpoint ─────────────────────────────────────────────────────

# Every verb is routed so the pipeline, not the framework, answers 405.
@app.api_route("/api/rank", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def rank(request: Request, service: RankingService = Depends(get_service)) -> Response:
    reply = await service.handle(InboundRequest.from_starlette(request))
    return to_response(reply)
