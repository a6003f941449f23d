from __future__ import annotations

import logging

from ..analytics.store import record_event
from ..boards.models import Board
from ..boards.store import board_lock, canonical_slot, is_member, require_board
from ..catalog.data_store import get_menu
from ..errors import (
    DuplicateVote,
    MenuNotFound,
    SlotNotFound,
    UnauthorizedVote,
    VoteLimitExceeded,
    VoteNotFound,
)
from . import store
from .models import Vote

logger = logging.getLogger(__name__)

MAX_VOTES_PER_USER = 3


def _authorize(board: Board, user_id: int) -> None:
    if not is_member(board, user_id):
        logger.warning("User %d is not a member of board %d", user_id, board.board_id)
        raise UnauthorizedVote()


def _place_vote(board: Board, user_id: int, menu_id: int, enforce_cap: bool) -> Vote:
    if get_menu(menu_id) is None:
        raise MenuNotFound(f"Menu not found (menu id: {menu_id})")

    if enforce_cap and store.count_user_votes(user_id, board.board_id) >= MAX_VOTES_PER_USER:
        logger.warning("User %d hit the vote limit on board %d", user_id, board.board_id)
        raise VoteLimitExceeded(
            f"Each member can vote for at most {MAX_VOTES_PER_USER} menus"
        )

    if store.has_vote(user_id, board.board_id, menu_id):
        logger.warning(
            "User %d already voted for menu %d on board %d", user_id, menu_id, board.board_id,
        )
        raise DuplicateVote()

    slot = canonical_slot(board.board_id, menu_id)
    if slot is None:
        raise SlotNotFound(f"Menu {menu_id} is not on board {board.board_id}")

    return store.add_vote(board.board_id, user_id, menu_id, slot.slot_id)


def cast_votes(user_id: int, board_id: int, menu_ids: list[int]) -> list[Vote]:
    """First-time voting: every menu is checked against the cap and duplicates.

    Processing stops at the first failure; votes created earlier in the
    batch stay recorded.
    """
    board = require_board(board_id)
    _authorize(board, user_id)

    created: list[Vote] = []
    with board_lock(board_id):
        for menu_id in menu_ids:
            created.append(_place_vote(board, user_id, menu_id, enforce_cap=True))

    logger.info("User %d cast %d votes on board %d", user_id, len(created), board_id)
    record_event("vote", {"action": "cast", "board_id": board_id, "count": len(created)})
    return created


def replace_votes(user_id: int, board_id: int, menu_ids: list[int]) -> list[Vote]:
    """Drop the user's votes on the board and record *menu_ids* instead.

    The per-user cap is not applied here, only on ``cast_votes``.
    """
    board = require_board(board_id)
    _authorize(board, user_id)

    created: list[Vote] = []
    with board_lock(board_id):
        store.remove_votes(store.list_user_votes(user_id, board_id))
        for menu_id in menu_ids:
            created.append(_place_vote(board, user_id, menu_id, enforce_cap=False))

    logger.info("User %d replaced votes on board %d with %d votes", user_id, board_id, len(created))
    record_event("vote", {"action": "replace", "board_id": board_id, "count": len(created)})
    return created


def delete_vote(vote_id: int) -> Vote:
    vote = store.get_vote(vote_id)
    if vote is None:
        raise VoteNotFound(f"Vote not found (vote id: {vote_id})")
    with board_lock(vote.board_id):
        store.remove_vote(vote_id)

    logger.info("Deleted vote %d on board %d", vote_id, vote.board_id)
    record_event("vote", {"action": "delete", "board_id": vote.board_id, "count": 1})
    return vote


def list_user_votes(user_id: int, board_id: int) -> list[Vote]:
    require_board(board_id)
    return store.list_user_votes(user_id, board_id)
