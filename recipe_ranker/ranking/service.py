from __future__ import annotations

import logging
import time
from typing import Any, Callable, Sequence

from pydantic import ValidationError

from ..analytics.store import record_event
from ..catalog.data_store import catalog_ids, get_catalog
from ..catalog.models import CatalogItem
from ..env import env_bool
from ..errors import (
    MethodNotAllowed,
    MissingQuery,
    RankingError,
    RateLimited,
    ServerMisconfigured,
    UnhandledFailure,
)
from ..llm.config import LLMConfig
from ..llm.groq_client import request_ranking
from ..transport.inbound import InboundRequest
from ..transport.replies import Reply
from .config import OriginConfig, RateLimitConfig
from .models import RankingQuery
from .origin import OriginGuard
from .rate_limit import SlidingWindowRateLimiter, now_ms
from .validation import parse_ranking

logger = logging.getLogger(__name__)


def _parse_query(body: dict[str, Any]) -> str:
    try:
        return RankingQuery.model_validate({"query": body.get("query")}).query
    except ValidationError as exc:
        raise MissingQuery() from exc


class RankingService:
    """
    Runs one ranking request through the pipeline:

    origin check -> method check -> rate limit -> body parse -> query check
    -> credential check -> LLM call -> output validation -> reply.

    Every stage either passes or raises a ``RankingError``; ``handle`` turns
    that (or any unexpected exception) into a JSON ``Reply``.
    """

    def __init__(
        self,
        catalog: Sequence[CatalogItem] | None = None,
        rate_limit: RateLimitConfig | None = None,
        origins: OriginConfig | None = None,
        llm: LLMConfig | None = None,
        strict_ids: bool | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._catalog = list(catalog) if catalog is not None else None
        self.limiter = SlidingWindowRateLimiter(rate_limit)
        self.origin_guard = OriginGuard(origins)
        self.llm_config = llm or LLMConfig()
        self.strict_ids = env_bool("STRICT_CATALOG_IDS") if strict_ids is None else strict_ids
        self._clock = clock

    @property
    def catalog(self) -> list[CatalogItem]:
        return self._catalog if self._catalog is not None else get_catalog()

    async def handle(self, request: InboundRequest) -> Reply:
        start_time = time.perf_counter()
        cors_headers: dict[str, str] = {}
        try:
            cors_headers = self.origin_guard.check(request.origin)
            reply = await self._run(request, cors_headers)
        except RankingError as exc:
            reply = Reply(exc.status_code, exc.to_payload(), {**cors_headers, **exc.headers})
            outcome = type(exc).__name__
            logger.info("Ranking request failed with %s (%s)", exc.status_code, outcome)
        except Exception as exc:
            logger.exception("Unhandled failure while ranking")
            failure = UnhandledFailure(details=str(exc))
            reply = Reply(failure.status_code, failure.to_payload(), cors_headers)
            outcome = type(failure).__name__
        else:
            outcome = "ok" if reply.status_code == 200 else "preflight"

        if outcome != "preflight":
            elapsed_ms = round((time.perf_counter() - start_time) * 1000, 1)
            record_event("rank", {
                "status_code": reply.status_code,
                "outcome": outcome,
                "client_key": request.client_key,
                "primary": reply.payload.get("primary") if outcome == "ok" else None,
                "response_time_ms": elapsed_ms,
            })
        return reply

    async def _run(self, request: InboundRequest, cors_headers: dict[str, str]) -> Reply:
        if request.method == "OPTIONS":
            return Reply.no_content(cors_headers)
        if request.method and request.method != "POST":
            raise MethodNotAllowed()

        # Check and record synchronously: no await between read and write.
        client_key = request.client_key
        now = self._clock()
        if not self.limiter.admit(client_key, now):
            retry_after = self.limiter.retry_after_seconds(client_key, now)
            logger.info("Rate limit hit for %s", client_key)
            raise RateLimited(headers={"Retry-After": str(retry_after)})

        body = await request.read_body()
        query = _parse_query(body)

        if not self.llm_config.api_key:
            logger.error("GROQ_API_KEY is not configured")
            raise ServerMisconfigured()

        items = self.catalog
        raw = await request_ranking(query, items, self.llm_config)
        known_ids = catalog_ids(items) if self.strict_ids else None
        ranking = parse_ranking(raw, known_ids)

        logger.info("Ranked %r -> %s", query, ranking.get("primary"))
        return Reply(200, ranking, cors_headers)
