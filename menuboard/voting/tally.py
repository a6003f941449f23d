from __future__ import annotations

from collections import Counter

from ..auth.users import get_user
from ..boards.store import board_lock, require_board
from ..catalog.data_store import get_menu
from ..errors import MenuNotFound, NoVotesYet, UserNotFound
from . import store
from .models import MenuVoteCount, QuorumResult, VoteResult


def _menu_name(menu_id: int) -> str:
    menu = get_menu(menu_id)
    if menu is None:
        raise MenuNotFound(f"Menu not found (menu id: {menu_id})")
    return menu.name


def tally(board_id: int, user_id: int) -> VoteResult:
    """Rank the board's menus by votes; ties go to the lower menu id."""
    board = require_board(board_id)
    if get_user(user_id) is None:
        raise UserNotFound()

    with board_lock(board_id):
        votes = store.list_board_votes(board_id)
    if not votes:
        raise NoVotesYet()

    counts = Counter(v.menu_id for v in votes)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))

    return VoteResult(
        team_name=board.team_name or board.name,
        votes=[
            MenuVoteCount(menu_id=menu_id, menu_name=_menu_name(menu_id), vote_value=count)
            for menu_id, count in ranked
        ],
        vote_date=votes[0].created_at.strftime("%Y-%m-%d"),
        has_voted=any(v.user_id == user_id for v in votes),
    )


def quorum(board_id: int) -> QuorumResult:
    board = require_board(board_id)
    with board_lock(board_id):
        voted = store.count_distinct_voters(board_id)
    return QuorumResult(voted_user_count=voted, team_members_num=board.team_members_num)
