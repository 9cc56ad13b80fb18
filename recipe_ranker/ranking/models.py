from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RankingQuery(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, strict=True)

    query: str = Field(..., min_length=1, description="Free-text recipe request")


class RankingResult(BaseModel):
    """Structural shape of the LLM answer. Extra keys are tolerated and relayed."""

    model_config = ConfigDict(strict=True, extra="allow")

    primary: str
    secondary: list
