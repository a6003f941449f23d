from __future__ import annotations

import itertools

from .models import Vote

_votes: dict[int, Vote] = {}
_vote_ids = itertools.count(1)


def add_vote(board_id: int, user_id: int, menu_id: int, slot_id: int) -> Vote:
    vote = Vote(
        vote_id=next(_vote_ids),
        board_id=board_id,
        user_id=user_id,
        menu_id=menu_id,
        slot_id=slot_id,
    )
    _votes[vote.vote_id] = vote
    return vote


def get_vote(vote_id: int) -> Vote | None:
    return _votes.get(vote_id)


def list_board_votes(board_id: int) -> list[Vote]:
    """Votes on the board in ledger (id) order."""
    return sorted(
        (v for v in _votes.values() if v.board_id == board_id),
        key=lambda v: v.vote_id,
    )


def list_user_votes(user_id: int, board_id: int) -> list[Vote]:
    return [v for v in list_board_votes(board_id) if v.user_id == user_id]


def count_user_votes(user_id: int, board_id: int) -> int:
    return sum(1 for v in _votes.values() if v.user_id == user_id and v.board_id == board_id)


def has_vote(user_id: int, board_id: int, menu_id: int) -> bool:
    return any(
        v.user_id == user_id and v.board_id == board_id and v.menu_id == menu_id
        for v in _votes.values()
    )


def count_distinct_voters(board_id: int) -> int:
    return len({v.user_id for v in _votes.values() if v.board_id == board_id})


def remove_vote(vote_id: int) -> None:
    _votes.pop(vote_id, None)


def remove_votes(votes: list[Vote]) -> None:
    for vote in votes:
        _votes.pop(vote.vote_id, None)


def remove_board_votes(board_id: int) -> int:
    doomed = [v for v in _votes.values() if v.board_id == board_id]
    remove_votes(doomed)
    return len(doomed)


def clear_votes() -> None:
    global _vote_ids
    _votes.clear()
    _vote_ids = itertools.count(1)
