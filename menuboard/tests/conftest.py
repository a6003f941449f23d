"""
Shared pytest fixtures for the menu board test suite.

Provides:
  - an autouse fixture that empties every in-memory store between tests;
  - ``sample_menus``: a small hand-built catalog for engine tests;
  - ``team_board``: a team board owned by user 1 with the bundled menus
    10, 20, 30 and 40 attached.
"""

from __future__ import annotations

from typing import Generator

import pytest

from menuboard.analytics.store import clear_events
from menuboard.boards.models import Board, BoardKind
from menuboard.boards.store import clear_boards, create_board, replace_selection
from menuboard.catalog.models import MenuItem
from menuboard.recommendations.cache import clear_cache
from menuboard.voting.store import clear_votes


@pytest.fixture(autouse=True)
def _reset_stores() -> Generator[None, None, None]:
    clear_boards()
    clear_votes()
    clear_cache()
    clear_events()
    yield


def _make_menu(menu_id: int, category: str, **tags: set[str]) -> MenuItem:
    return MenuItem(
        menu_id=menu_id,
        name=f"Menu {menu_id}",
        image_url=f"/static/menus/{menu_id}.jpg",
        taste=frozenset(tags.get("taste", set())),
        carb=frozenset(tags.get("carb", set())),
        weather=frozenset(tags.get("weather", set())),
        category=category,
    )


@pytest.fixture
def sample_menus() -> list[MenuItem]:
    return [
        _make_menu(1, "Korean", taste={"spicy"}, carb={"rice"}, weather={"cold"}),
        _make_menu(2, "Korean", taste={"mild"}, carb={"noodle"}, weather={"hot"}),
        _make_menu(3, "Japanese", taste={"spicy"}, carb={"noodle"}, weather={"rainy"}),
        _make_menu(4, "Mexican", taste={"savory"}, carb={"bread"}, weather={"sunny"}),
        _make_menu(5, "Chinese", taste={"sweet", "sour"}, carb={"rice"}, weather={"rainy"}),
    ]


@pytest.fixture
def team_board() -> Board:
    board = create_board(
        BoardKind.team, "Friday lunch", owner_id=1, team_name="Platform", team_members_num=4,
    )
    replace_selection(board.board_id, [10, 20, 30, 40])
    return board


@pytest.fixture
def make_menu():
    return _make_menu
