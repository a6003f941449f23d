from __future__ import annotations

from fastapi.testclient import TestClient

from menuboard.app import app
from menuboard.boards.models import BoardKind
from menuboard.boards.store import create_board, get_board, update_board


def _client(username: str) -> TestClient:
    c = TestClient(app)
    c.post("/auth/login", json={"username": username, "password": f"{username}123"})
    return c


def _team_board(owner: TestClient) -> int:
    resp = owner.post("/teamboards", json={
        "teamName": "Backend crew",
        "teamMembersNum": 3,
        "teamBoardName": "Team dinner",
    })
    return resp.json()["boardId"]


# ── update_board ─────────────────────────────────────────────────────────


def test_update_board_changes_only_given_fields():
    board = create_board(
        BoardKind.team, "Lunch", owner_id=1, team_name="Crew", team_members_num=4,
    )
    updated = update_board(board.board_id, team_members_num=6)

    assert updated.team_members_num == 6
    assert updated.name == "Lunch"
    assert updated.team_name == "Crew"
    assert get_board(board.board_id) == updated


# ── Personal boards ──────────────────────────────────────────────────────


def test_rename_personal_board():
    owner = _client("user")
    board_id = owner.post("/personalboards", json={"name": "Weekday"}).json()["boardId"]

    resp = owner.patch(f"/personalboards/{board_id}", json={"name": "Weekend"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Weekend"
    assert [b["name"] for b in owner.get("/personalboards").json()] == ["Weekend"]


def test_rename_personal_board_owner_only():
    owner, other = _client("user"), _client("friend")
    board_id = owner.post("/personalboards", json={"name": "Weekday"}).json()["boardId"]
    assert other.patch(f"/personalboards/{board_id}", json={"name": "Mine"}).status_code == 403


def test_rename_personal_board_rejects_empty_name():
    owner = _client("user")
    board_id = owner.post("/personalboards", json={"name": "Weekday"}).json()["boardId"]
    assert owner.patch(f"/personalboards/{board_id}", json={"name": ""}).status_code == 422


# ── Team boards ──────────────────────────────────────────────────────────


def test_update_team_board():
    owner = _client("user")
    board_id = _team_board(owner)

    resp = owner.patch(f"/teamboards/{board_id}", json={
        "teamName": "Frontend crew",
        "teamMembersNum": 5,
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["teamName"] == "Frontend crew"
    assert body["teamMembersNum"] == 5
    assert body["name"] == "Team dinner"

    quorum = owner.get(f"/teamboards/{board_id}/votes/quorum").json()
    assert quorum["teamMembersNum"] == 5


def test_update_team_board_owner_only():
    owner, friend = _client("user"), _client("friend")
    board_id = _team_board(owner)
    friend.post(f"/teamboards/{board_id}/members")
    resp = friend.patch(f"/teamboards/{board_id}", json={"teamBoardName": "Mine"})
    assert resp.status_code == 403


def test_view_team_board():
    owner, friend = _client("user"), _client("friend")
    board_id = _team_board(owner)
    owner.post(f"/teamboards/{board_id}/menus", json={"menuId": 10})
    owner.post(f"/teamboards/{board_id}/menus", json={"menuId": 1})

    assert friend.get(f"/teamboards/{board_id}").status_code == 403
    friend.post(f"/teamboards/{board_id}/members")

    resp = friend.get(f"/teamboards/{board_id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["board"]["teamName"] == "Backend crew"
    assert [g["category"] for g in body["categories"]] == ["Korean", "Japanese"]


def test_view_unknown_team_board():
    owner = _client("user")
    assert owner.get("/teamboards/404").status_code == 404
