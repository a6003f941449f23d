from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Fixed emission order for grouped recommendations.
CATEGORY_ORDER: tuple[str, ...] = (
    "Korean",
    "Chinese",
    "Japanese",
    "Western",
    "Indian/Vietnamese/Thai",
    "Mexican",
    "Meat/Seafood",
)


class MenuItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    menu_id: int
    name: str
    image_url: str = ""
    taste: frozenset[str] = frozenset()
    carb: frozenset[str] = frozenset()
    weather: frozenset[str] = frozenset()
    category: str
    tags: tuple[str, ...] = ()
