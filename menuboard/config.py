from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_BUNDLED_CATALOG = Path(__file__).resolve().parent / "data" / "menus.csv"


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for the menu board service.
    """

    session_secret: str = os.getenv(
        "SESSION_SECRET", "menuboard-secret-change-in-production"
    )
    catalog_path: Path = Path(os.getenv("MENU_CATALOG_PATH", str(_BUNDLED_CATALOG)))
    guest_cache_ttl: float = float(os.getenv("GUEST_CACHE_TTL", "300"))


DEFAULT_SETTINGS = Settings()
