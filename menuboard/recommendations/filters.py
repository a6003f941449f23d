from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from ..catalog.models import MenuItem
from .models import ALL, RecommendOptions


@dataclass(frozen=True)
class Unconstrained:
    """Dimension filter that accepts every menu."""

    def matches(self, labels: frozenset[str]) -> bool:
        return True


@dataclass(frozen=True)
class LabelSet:
    """Dimension filter that accepts menus sharing at least one label."""

    labels: frozenset[str]

    def matches(self, labels: frozenset[str]) -> bool:
        return not self.labels.isdisjoint(labels)


DimensionFilter = Union[Unconstrained, LabelSet]


def parse_dimension(values: Iterable[str]) -> DimensionFilter:
    """Turn a wire option list into a typed filter.

    ``["ALL"]`` (or any list containing ``ALL``) is unconstrained. An empty
    list is a ``LabelSet`` with no labels and therefore matches nothing.
    """
    labels = frozenset(v.strip() for v in values)
    if ALL in labels:
        return Unconstrained()
    return LabelSet(labels)


@dataclass(frozen=True)
class MenuFilter:
    taste: DimensionFilter
    carb: DimensionFilter
    weather: DimensionFilter
    category: DimensionFilter

    @classmethod
    def from_options(cls, options: RecommendOptions) -> "MenuFilter":
        return cls(
            taste=parse_dimension(options.taste_options),
            carb=parse_dimension(options.carb_options),
            weather=parse_dimension(options.weather_options),
            category=parse_dimension(options.category_options),
        )

    def matches(self, menu: MenuItem) -> bool:
        return (
            self.taste.matches(menu.taste)
            and self.carb.matches(menu.carb)
            and self.weather.matches(menu.weather)
            and self.category.matches(frozenset((menu.category,)))
        )
