from __future__ import annotations

import re
from typing import Any, Collection

from pydantic import ValidationError

from ..errors import UpstreamEmpty, UpstreamMalformed, UpstreamUnparsable
from ..jsonutil import strict_loads
from .models import RankingResult

_FENCE_RE = re.compile(r"```json|```", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def parse_ranking(raw: str | None, known_ids: Collection[str] | None = None) -> dict[str, Any]:
    """
    Validate LLM output and return the parsed ranking object verbatim.

    When *known_ids* is given, every returned id must belong to it.
    """
    text = (raw or "").strip()
    if not text:
        raise UpstreamEmpty()

    try:
        parsed = strict_loads(strip_code_fences(text))
    except ValueError as exc:
        raise UpstreamUnparsable() from exc

    if not isinstance(parsed, dict):
        raise UpstreamMalformed()
    try:
        result = RankingResult.model_validate(parsed)
    except ValidationError as exc:
        raise UpstreamMalformed() from exc

    if known_ids is not None:
        returned = [result.primary, *result.secondary]
        unknown = [rid for rid in returned if not isinstance(rid, str) or rid not in known_ids]
        if unknown:
            raise UpstreamMalformed(details=f"Unknown recipe ids: {', '.join(map(str, unknown))}")

    return parsed
