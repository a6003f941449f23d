from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from menuboard.boards import store as board_store
from menuboard.boards.models import BoardKind
from menuboard.boards.store import (
    add_member,
    add_slot,
    board_lock,
    canonical_slot,
    create_board,
    delete_board,
    replace_selection,
)
from menuboard.errors import (
    BoardNotFound,
    DuplicateVote,
    MenuNotFound,
    SlotNotFound,
    UnauthorizedVote,
    VoteLimitExceeded,
    VoteNotFound,
)
from menuboard.voting import store
from menuboard.voting.ledger import (
    MAX_VOTES_PER_USER,
    cast_votes,
    delete_vote,
    list_user_votes,
    replace_votes,
)


def test_first_three_votes_succeed_fourth_exceeds_limit(team_board):
    votes = cast_votes(1, team_board.board_id, [10, 20, 30])
    assert [v.menu_id for v in votes] == [10, 20, 30]
    assert MAX_VOTES_PER_USER == 3

    with pytest.raises(VoteLimitExceeded):
        cast_votes(1, team_board.board_id, [40])
    assert store.count_user_votes(1, team_board.board_id) == 3


def test_limit_counts_votes_from_same_batch(team_board):
    with pytest.raises(VoteLimitExceeded):
        cast_votes(1, team_board.board_id, [10, 20, 30, 40])
    # Earlier votes in the failed batch are not rolled back
    assert [v.menu_id for v in list_user_votes(1, team_board.board_id)] == [10, 20, 30]


def test_duplicate_vote_rejected(team_board):
    cast_votes(1, team_board.board_id, [10])
    with pytest.raises(DuplicateVote):
        cast_votes(1, team_board.board_id, [10])


def test_duplicate_in_same_batch_fails_on_second_occurrence(team_board):
    with pytest.raises(DuplicateVote):
        cast_votes(1, team_board.board_id, [20, 20])
    assert [v.menu_id for v in list_user_votes(1, team_board.board_id)] == [20]


def test_non_member_cannot_vote(team_board):
    with pytest.raises(UnauthorizedVote):
        cast_votes(3, team_board.board_id, [10])


def test_member_can_vote(team_board):
    add_member(team_board.board_id, 2)
    assert len(cast_votes(2, team_board.board_id, [10])) == 1


def test_unknown_board(team_board):
    with pytest.raises(BoardNotFound):
        cast_votes(1, 999, [10])


def test_unknown_menu(team_board):
    with pytest.raises(MenuNotFound):
        cast_votes(1, team_board.board_id, [9999])


def test_menu_not_on_board(team_board):
    with pytest.raises(SlotNotFound):
        cast_votes(1, team_board.board_id, [1])


def test_vote_binds_to_lowest_slot(team_board):
    first_slot = canonical_slot(team_board.board_id, 20)
    later = add_slot(team_board.board_id, 20, added_by=1)
    assert later.slot_id > first_slot.slot_id

    vote = cast_votes(1, team_board.board_id, [20])[0]
    assert vote.slot_id == first_slot.slot_id


def test_vote_on_slot_added_later(team_board):
    slot = add_slot(team_board.board_id, 1, added_by=1)
    vote = cast_votes(1, team_board.board_id, [1])[0]
    assert vote.slot_id == slot.slot_id


def test_replace_votes_does_not_enforce_limit(team_board):
    for menu_id in (1, 2):
        add_slot(team_board.board_id, menu_id, added_by=1)
    cast_votes(1, team_board.board_id, [10, 20, 30])

    replaced = replace_votes(1, team_board.board_id, [40, 30, 20, 10, 1])

    assert len(replaced) == 5
    assert [v.menu_id for v in list_user_votes(1, team_board.board_id)] == [40, 30, 20, 10, 1]


def test_replace_votes_keeps_other_users_votes(team_board):
    add_member(team_board.board_id, 2)
    cast_votes(2, team_board.board_id, [10])
    cast_votes(1, team_board.board_id, [10, 20])

    replace_votes(1, team_board.board_id, [30])

    assert [v.menu_id for v in list_user_votes(1, team_board.board_id)] == [30]
    assert [v.menu_id for v in list_user_votes(2, team_board.board_id)] == [10]


def test_replace_votes_rejects_duplicates_in_new_list(team_board):
    with pytest.raises(DuplicateVote):
        replace_votes(1, team_board.board_id, [10, 10])


def test_replace_votes_requires_membership(team_board):
    with pytest.raises(UnauthorizedVote):
        replace_votes(3, team_board.board_id, [10])


def test_delete_vote(team_board):
    vote = cast_votes(1, team_board.board_id, [10])[0]
    delete_vote(vote.vote_id)
    assert store.get_vote(vote.vote_id) is None
    with pytest.raises(VoteNotFound):
        delete_vote(vote.vote_id)


def test_deleting_frees_a_vote(team_board):
    votes = cast_votes(1, team_board.board_id, [10, 20, 30])
    delete_vote(votes[0].vote_id)
    assert [v.menu_id for v in cast_votes(1, team_board.board_id, [40])] == [40]


def test_concurrent_casts_never_pass_limit_or_duplicate(team_board):
    board_id = team_board.board_id
    menu_ids = [10, 20, 30, 40]

    def _cast(i):
        try:
            return cast_votes(1, board_id, [menu_ids[i % len(menu_ids)]])
        except (VoteLimitExceeded, DuplicateVote):
            return []

    with ThreadPoolExecutor(max_workers=20) as pool:
        list(pool.map(_cast, range(20)))

    votes = list_user_votes(1, board_id)
    assert store.count_user_votes(1, board_id) == MAX_VOTES_PER_USER
    assert len({v.menu_id for v in votes}) == len(votes)


def test_deleting_board_removes_its_votes():
    board = create_board(BoardKind.personal, "Solo", owner_id=1)
    replace_selection(board.board_id, [1, 2])
    cast_votes(1, board.board_id, [1, 2])

    assert delete_board(board.board_id) == 2
    assert store.list_board_votes(board.board_id) == []


def test_deleting_board_keeps_other_boards_votes(team_board):
    other = create_board(BoardKind.team, "Other", owner_id=1, team_name="Other")
    replace_selection(other.board_id, [10])
    cast_votes(1, other.board_id, [10])
    cast_votes(1, team_board.board_id, [10])

    delete_board(other.board_id)

    assert [v.menu_id for v in store.list_board_votes(team_board.board_id)] == [10]


def test_deleting_board_releases_its_lock(team_board):
    board_lock(team_board.board_id)
    assert team_board.board_id in board_store._locks

    delete_board(team_board.board_id)

    assert team_board.board_id not in board_store._locks
