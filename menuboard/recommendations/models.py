from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ALL = "ALL"


class ApiModel(BaseModel):
    """Base for request/response bodies: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecommendOptions(ApiModel):
    taste_options: list[str] = Field(..., description='Taste labels, or ["ALL"]')
    carb_options: list[str] = Field(..., description='Carb labels, or ["ALL"]')
    weather_options: list[str] = Field(..., description='Weather labels, or ["ALL"]')
    category_options: list[str] = Field(..., description='Categories, or ["ALL"]')


class MenuSummary(ApiModel):
    menu_id: int
    image_url: str
    menu_name: str
    tags: list[str]


class RecommendedMenu(MenuSummary):
    category: str


class CategoryGroup(ApiModel):
    category: str
    items: list[MenuSummary]
