from __future__ import annotations

import itertools
import logging
import threading
from typing import Iterable

from ..errors import BoardNotFound
from ..voting import store as vote_store
from .models import Board, BoardKind, BoardMenuSlot

logger = logging.getLogger(__name__)

_boards: dict[int, Board] = {}
_members: set[tuple[int, int]] = set()  # (board_id, user_id)
_selections: dict[int, list[BoardMenuSlot]] = {}
_board_ids = itertools.count(1)
_slot_ids = itertools.count(1)

_locks: dict[int, threading.RLock] = {}
_locks_guard = threading.Lock()


def board_lock(board_id: int) -> threading.RLock:
    """Return the re-entrant lock that serializes writes on *board_id*."""
    with _locks_guard:
        lock = _locks.get(board_id)
        if lock is None:
            lock = _locks[board_id] = threading.RLock()
        return lock


# ── Boards ───────────────────────────────────────────────────────────────


def create_board(
    kind: BoardKind,
    name: str,
    owner_id: int,
    team_name: str | None = None,
    team_members_num: int = 1,
) -> Board:
    board = Board(
        board_id=next(_board_ids),
        kind=kind,
        name=name,
        owner_id=owner_id,
        team_name=team_name,
        team_members_num=team_members_num,
    )
    _boards[board.board_id] = board
    _selections[board.board_id] = []
    logger.info("Created %s board %d for user %d", kind.value, board.board_id, owner_id)
    return board


def get_board(board_id: int) -> Board | None:
    return _boards.get(board_id)


def require_board(board_id: int) -> Board:
    board = _boards.get(board_id)
    if board is None:
        raise BoardNotFound(f"Board not found (board id: {board_id})")
    return board


def list_boards_for_user(user_id: int, kind: BoardKind | None = None) -> list[Board]:
    """Boards the user owns or has joined, oldest first."""
    boards = [
        b for b in _boards.values()
        if b.owner_id == user_id or (b.board_id, user_id) in _members
    ]
    if kind is not None:
        boards = [b for b in boards if b.kind == kind]
    return sorted(boards, key=lambda b: b.board_id)


def delete_board(board_id: int) -> int:
    """Remove the board with its memberships, selection and votes.

    Returns the number of votes removed.
    """
    with board_lock(board_id):
        require_board(board_id)
        removed = vote_store.remove_board_votes(board_id)
        del _boards[board_id]
        _selections.pop(board_id, None)
        for key in [m for m in _members if m[0] == board_id]:
            _members.discard(key)
    with _locks_guard:
        _locks.pop(board_id, None)
    logger.info("Deleted board %d and %d votes", board_id, removed)
    return removed


def update_board(
    board_id: int,
    name: str | None = None,
    team_name: str | None = None,
    team_members_num: int | None = None,
) -> Board:
    """Apply the given non-``None`` fields to the board."""
    changes = {
        key: value
        for key, value in (
            ("name", name),
            ("team_name", team_name),
            ("team_members_num", team_members_num),
        )
        if value is not None
    }
    with board_lock(board_id):
        board = require_board(board_id).model_copy(update=changes)
        _boards[board_id] = board
    logger.info("Updated board %d: %s", board_id, sorted(changes))
    return board


# ── Membership ───────────────────────────────────────────────────────────


def add_member(board_id: int, user_id: int) -> None:
    require_board(board_id)
    _members.add((board_id, user_id))


def is_member(board: Board, user_id: int) -> bool:
    """The board owner counts as a member even without a membership row."""
    return board.owner_id == user_id or (board.board_id, user_id) in _members


# ── Menu selection ───────────────────────────────────────────────────────


def get_selection(board_id: int) -> list[BoardMenuSlot]:
    require_board(board_id)
    return list(_selections.get(board_id, []))


def replace_selection(board_id: int, menu_ids: Iterable[int]) -> list[BoardMenuSlot]:
    """Discard the board's slots and attach *menu_ids* in order.

    The new list is built first and swapped in under the board lock, so
    readers see either the old selection or the new one.
    """
    with board_lock(board_id):
        require_board(board_id)
        new_slots = [
            BoardMenuSlot(slot_id=next(_slot_ids), board_id=board_id, menu_id=menu_id)
            for menu_id in menu_ids
        ]
        _selections[board_id] = new_slots
    logger.info("Replaced selection of board %d with %d menus", board_id, len(new_slots))
    return list(new_slots)


def add_slot(board_id: int, menu_id: int, added_by: int | None = None) -> BoardMenuSlot:
    """Append one more slot for *menu_id*; the same menu may appear repeatedly."""
    with board_lock(board_id):
        require_board(board_id)
        slot = BoardMenuSlot(
            slot_id=next(_slot_ids), board_id=board_id, menu_id=menu_id, added_by=added_by,
        )
        _selections[board_id] = [*_selections.get(board_id, []), slot]
    return slot


def canonical_slot(board_id: int, menu_id: int) -> BoardMenuSlot | None:
    """Lowest-id slot holding *menu_id* on the board, or ``None``."""
    slots = [s for s in _selections.get(board_id, []) if s.menu_id == menu_id]
    if not slots:
        return None
    return min(slots, key=lambda s: s.slot_id)


def clear_boards() -> None:
    global _board_ids, _slot_ids
    _boards.clear()
    _members.clear()
    _selections.clear()
    _locks.clear()
    _board_ids = itertools.count(1)
    _slot_ids = itertools.count(1)
