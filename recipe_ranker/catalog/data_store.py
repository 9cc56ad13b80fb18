from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..env import env_str
from .models import CatalogItem

logger = logging.getLogger(__name__)

_DEFAULT_CSV = Path(__file__).resolve().parent.parent / "data" / "recipes.csv"
REQUIRED_COLUMNS = ["id", "title", "details"]

_items: list[CatalogItem] | None = None


def _catalog_path() -> Path:
    override = env_str("RECIPES_PATH")
    return Path(override) if override else _DEFAULT_CSV


def load_catalog(path: Path) -> list[CatalogItem]:
    """Read and validate a recipe CSV with ``id,title,details`` columns."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Catalog {path} is missing columns: {', '.join(missing)}")

    df["id"] = df["id"].str.strip()
    if (df["id"] == "").any():
        raise ValueError(f"Catalog {path} contains a row without an id")

    duplicated = df.loc[df["id"].duplicated(), "id"].unique().tolist()
    if duplicated:
        raise ValueError(f"Catalog {path} has duplicate ids: {', '.join(duplicated)}")

    return [
        CatalogItem(id=row["id"], title=row["title"].strip(), details=row["details"].strip())
        for _, row in df[REQUIRED_COLUMNS].iterrows()
    ]


def get_catalog() -> list[CatalogItem]:
    """Return the in-memory recipe list, loading it on first call."""
    global _items
    if _items is None:
        path = _catalog_path()
        _items = load_catalog(path)
        logger.info("Loaded %d recipes from %s", len(_items), path)
    return _items


def catalog_ids(items: list[CatalogItem] | None = None) -> frozenset[str]:
    return frozenset(item.id for item in (items if items is not None else get_catalog()))


def reset_catalog() -> None:
    global _items
    _items = None
