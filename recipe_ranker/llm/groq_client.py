from __future__ import annotations

import logging
from typing import Any, Sequence

from groq import APIStatusError, AsyncGroq

from ..catalog.models import CatalogItem
from ..errors import UpstreamError
from .config import LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You rank recipes from the provided list. "
    'Respond with JSON only using this shape: {"primary":"R##","secondary":["R##","R##"]}. '
    "Choose the closest match for primary and the next two closest for secondary. "
    "Only use ids from the provided list. Never invent new recipes, never summarize."
)


def render_catalog(items: Sequence[CatalogItem]) -> str:
    return "\n".join(f"{item.id} | {item.title} | {item.details}" for item in items)


def build_messages(query: str, items: Sequence[CatalogItem]) -> list[dict[str, str]]:
    user_message = (
        f"Recipe list:\n{render_catalog(items)}\n\n"
        f"User request: {query}\n"
        "Return JSON exactly with the recipe ids."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_message},
    ]


def _first_content(completion: Any) -> str:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return (getattr(message, "content", None) or "").strip()


async def request_ranking(
    query: str,
    items: Sequence[CatalogItem],
    config: LLMConfig,
) -> str:
    """
    Ask the LLM to rank *items* against *query*.

    Returns the raw completion text (possibly empty). A non-2xx upstream
    status raises ``UpstreamError`` carrying the upstream code and body.
    Transport failures (timeouts, connection errors) propagate unchanged.
    """
    client = AsyncGroq(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.timeout,
        max_retries=0,
    )
    try:
        completion = await client.chat.completions.create(
            model=config.model,
            messages=build_messages(query, items),
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    except APIStatusError as exc:
        logger.warning("LLM API returned HTTP %s", exc.status_code)
        raise UpstreamError(exc.status_code, exc.response.text) from exc
    finally:
        await client.close()

    return _first_content(completion)
