from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description='Stable recipe id, e.g. "R07"')
    title: str
    details: str = ""
