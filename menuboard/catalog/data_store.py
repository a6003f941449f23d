from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..config import DEFAULT_SETTINGS
from .models import MenuItem

logger = logging.getLogger(__name__)

TAG_COLUMNS = ["taste", "carb", "weather"]

_df: pd.DataFrame | None = None
_menus: list[MenuItem] | None = None
_by_id: dict[int, MenuItem] = {}


def _split_labels(raw: str) -> list[str]:
    return [label.strip() for label in str(raw).split("|") if label.strip()]


def _load(path: Path) -> pd.DataFrame:
    try:
        df = pd.read_csv(path)
    except (OSError, pd.errors.ParserError):
        logger.warning("Failed to load menu catalog from %s", path, exc_info=True)
        raise

    # Pre-parse pipe-separated tag columns into lists, keeping file order
    for col in TAG_COLUMNS:
        df[f"{col}_list"] = df[col].fillna("").apply(_split_labels)

    df["category"] = df["category"].fillna("").str.strip()
    df["image_url"] = df["image_url"].fillna("")
    return df


def _row_to_menu(row: pd.Series) -> MenuItem:
    tags: list[str] = []
    for col in TAG_COLUMNS:
        for label in row[f"{col}_list"]:
            if label not in tags:
                tags.append(label)
    return MenuItem(
        menu_id=int(row["id"]),
        name=row["name"],
        image_url=row["image_url"],
        taste=frozenset(row["taste_list"]),
        carb=frozenset(row["carb_list"]),
        weather=frozenset(row["weather_list"]),
        category=row["category"],
        tags=tuple(tags),
    )


def load_catalog(path: Path | None = None) -> list[MenuItem]:
    """(Re)load the catalog from *path*, defaulting to the configured CSV."""
    global _df, _menus, _by_id
    _df = _load(path or DEFAULT_SETTINGS.catalog_path)
    _menus = [_row_to_menu(row) for _, row in _df.iterrows()]
    _by_id = {m.menu_id: m for m in _menus}
    logger.info("Loaded %d menus from catalog", len(_menus))
    return _menus


def get_dataframe() -> pd.DataFrame:
    """Return the in-memory catalog DataFrame, loading it on first call."""
    if _df is None:
        load_catalog()
    return _df


def get_menus() -> list[MenuItem]:
    """Return every menu item in catalog order."""
    if _menus is None:
        load_catalog()
    return _menus


def get_menu(menu_id: int) -> MenuItem | None:
    if _menus is None:
        load_catalog()
    return _by_id.get(menu_id)
