from __future__ import annotations

import time
from typing import Iterable

from ..analytics.store import record_event
from ..boards.store import board_lock, get_selection, replace_selection, require_board
from ..catalog.data_store import get_menu, get_menus
from ..catalog.models import CATEGORY_ORDER, MenuItem
from ..errors import MenuNotFound
from .cache import cache_get, cache_set
from .filters import MenuFilter
from .models import CategoryGroup, MenuSummary, RecommendedMenu, RecommendOptions


def _to_summary(menu: MenuItem) -> MenuSummary:
    return MenuSummary(
        menu_id=menu.menu_id,
        image_url=menu.image_url,
        menu_name=menu.name,
        tags=list(menu.tags),
    )


def _to_recommended(menu: MenuItem) -> RecommendedMenu:
    return RecommendedMenu(
        menu_id=menu.menu_id,
        image_url=menu.image_url,
        menu_name=menu.name,
        category=menu.category,
        tags=list(menu.tags),
    )


def filter_menus(all_menus: Iterable[MenuItem], options: RecommendOptions) -> list[MenuItem]:
    """Menus passing every dimension filter, in catalog order."""
    menu_filter = MenuFilter.from_options(options)
    return [m for m in all_menus if menu_filter.matches(m)]


def categorize(menus: Iterable[MenuItem]) -> list[CategoryGroup]:
    """Group *menus* by category in the fixed category order.

    Empty categories and categories outside ``CATEGORY_ORDER`` are dropped.
    """
    buckets: dict[str, list[MenuSummary]] = {c: [] for c in CATEGORY_ORDER}
    for menu in menus:
        bucket = buckets.get(menu.category)
        if bucket is not None:
            bucket.append(_to_summary(menu))
    return [
        CategoryGroup(category=category, items=items)
        for category, items in buckets.items()
        if items
    ]


def _record_recommend(
    source: str,
    options: RecommendOptions,
    results: int,
    start_time: float,
    cache_hit: bool = False,
) -> None:
    record_event("recommend", {
        "source": source,
        "taste": options.taste_options,
        "carb": options.carb_options,
        "weather": options.weather_options,
        "category": options.category_options,
        "results_returned": results,
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
        "cache_hit": cache_hit,
    })


def recommend(board_id: int, options: RecommendOptions) -> list[CategoryGroup]:
    """Filter the catalog and store the result as the board's selection."""
    start_time = time.time()
    require_board(board_id)

    matches = filter_menus(get_menus(), options)
    with board_lock(board_id):
        replace_selection(board_id, [m.menu_id for m in matches])

    _record_recommend("board", options, len(matches), start_time)
    return categorize(matches)


def recommend_transient(options: RecommendOptions) -> list[CategoryGroup]:
    """Guest path: same computation as ``recommend`` without touching any board."""
    start_time = time.time()

    options_dict = options.model_dump()
    cached = cache_get(options_dict)
    if cached is not None:
        _record_recommend(
            "guest", options, sum(len(g.items) for g in cached), start_time, cache_hit=True,
        )
        return [g.model_copy(deep=True) for g in cached]

    matches = filter_menus(get_menus(), options)
    groups = categorize(matches)
    cache_set(options_dict, [g.model_copy(deep=True) for g in groups])

    _record_recommend("guest", options, len(matches), start_time)
    return groups


def _selected_menus(board_id: int) -> list[MenuItem]:
    menus: list[MenuItem] = []
    for slot in get_selection(board_id):
        menu = get_menu(slot.menu_id)
        if menu is None:
            raise MenuNotFound(f"Menu not found (menu id: {slot.menu_id})")
        menus.append(menu)
    return menus


def list_by_board(board_id: int) -> list[RecommendedMenu]:
    return [_to_recommended(m) for m in _selected_menus(board_id)]


def list_by_board_grouped(board_id: int) -> list[CategoryGroup]:
    return categorize(_selected_menus(board_id))


def menu_details(board_id: int, menu_id: int) -> RecommendedMenu:
    require_board(board_id)
    menu = get_menu(menu_id)
    if menu is None:
        raise MenuNotFound(f"Menu not found (menu id: {menu_id})")
    if all(slot.menu_id != menu_id for slot in get_selection(board_id)):
        raise MenuNotFound("This menu is not on the board")
    return _to_recommended(menu)
