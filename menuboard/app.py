from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import require_admin, require_user, require_user_id
from .auth.models import LoginRequest
from .auth.users import authenticate
from .boards import store as boards
from .boards.models import (
    Board,
    BoardKind,
    BoardOut,
    PersonalBoardRequest,
    PersonalBoardUpdate,
    SlotOut,
    SlotRequest,
    TeamBoardDetail,
    TeamBoardRequest,
    TeamBoardUpdate,
)
from .catalog.data_store import get_dataframe, get_menu
from .catalog.models import CATEGORY_ORDER
from .config import DEFAULT_SETTINGS
from .errors import BoardNotFound, MenuBoardError, MenuNotFound
from .recommendations.cache import get_cache_stats
from .recommendations.engine import (
    list_by_board,
    list_by_board_grouped,
    menu_details,
    recommend,
    recommend_transient,
)
from .recommendations.models import CategoryGroup, RecommendedMenu, RecommendOptions
from .voting import ledger
from .voting import store as vote_store
from .voting.models import QuorumResult, Vote, VoteOut, VoteRequest, VoteResult
from .voting.tally import quorum, tally

app = FastAPI(title="Menu Board API", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_SETTINGS.session_secret)


@app.exception_handler(MenuBoardError)
async def menu_board_error_handler(request: Request, exc: MenuBoardError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def _board_out(board: Board) -> BoardOut:
    return BoardOut(
        board_id=board.board_id,
        kind=board.kind,
        name=board.name,
        owner_id=board.owner_id,
        team_name=board.team_name,
        team_members_num=board.team_members_num,
        created_date=board.created_at,
    )


def _vote_out(vote: Vote) -> VoteOut:
    menu = get_menu(vote.menu_id)
    return VoteOut(
        vote_id=vote.vote_id,
        board_id=vote.board_id,
        user_id=vote.user_id,
        menu_id=vote.menu_id,
        menu_name=menu.name if menu else "",
        slot_id=vote.slot_id,
        created_date=vote.created_at,
    )


def _require_kind(board_id: int, kind: BoardKind) -> Board:
    board = boards.require_board(board_id)
    if board.kind != kind:
        raise BoardNotFound(f"No {kind.value} board with id {board_id}")
    return board


def _require_owner(board: Board, user_id: int) -> None:
    if board.owner_id != user_id:
        raise HTTPException(status_code=403, detail="Only the board owner can do this")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    df = get_dataframe()
    labels: dict[str, list[str]] = {}
    for dim in ("taste", "carb", "weather"):
        values: set[str] = set()
        for row in df[f"{dim}_list"]:
            values.update(row)
        labels[dim] = sorted(values)
    present = set(df["category"].dropna().unique().tolist())
    labels["category"] = [c for c in CATEGORY_ORDER if c in present]
    return {"labels": labels, "category_order": list(CATEGORY_ORDER), "menus": len(df)}


@app.post("/personalboards/guest/recommend", response_model=list[CategoryGroup])
def guest_recommend(body: RecommendOptions) -> list[CategoryGroup]:
    return recommend_transient(body)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Personal boards ──────────────────────────────────────────────────────


@app.post("/personalboards", response_model=BoardOut)
def create_personal_board(
    body: PersonalBoardRequest, user_id: int = Depends(require_user_id),
) -> BoardOut:
    return _board_out(boards.create_board(BoardKind.personal, body.name, user_id))


@app.get("/personalboards", response_model=list[BoardOut])
def list_personal_boards(user_id: int = Depends(require_user_id)) -> list[BoardOut]:
    return [_board_out(b) for b in boards.list_boards_for_user(user_id, BoardKind.personal)]


@app.get("/personalboards/{board_id}", response_model=list[RecommendedMenu])
def personal_board_menus(
    board_id: int, user_id: int = Depends(require_user_id),
) -> list[RecommendedMenu]:
    _require_kind(board_id, BoardKind.personal)
    return list_by_board(board_id)


@app.get("/personalboards/{board_id}/categories", response_model=list[CategoryGroup])
def personal_board_categories(
    board_id: int, user_id: int = Depends(require_user_id),
) -> list[CategoryGroup]:
    _require_kind(board_id, BoardKind.personal)
    return list_by_board_grouped(board_id)


@app.get("/personalboards/{board_id}/{menu_id}", response_model=RecommendedMenu)
def personal_board_menu(
    board_id: int, menu_id: int, user_id: int = Depends(require_user_id),
) -> RecommendedMenu:
    _require_kind(board_id, BoardKind.personal)
    return menu_details(board_id, menu_id)


@app.post("/personalboards/{board_id}/recommend", response_model=list[CategoryGroup])
def personal_board_recommend(
    board_id: int, body: RecommendOptions, user_id: int = Depends(require_user_id),
) -> list[CategoryGroup]:
    _require_owner(_require_kind(board_id, BoardKind.personal), user_id)
    return recommend(board_id, body)


@app.delete("/personalboards/{board_id}")
def delete_personal_board(board_id: int, user_id: int = Depends(require_user_id)) -> dict:
    _require_owner(_require_kind(board_id, BoardKind.personal), user_id)
    removed = boards.delete_board(board_id)
    return {"message": f"Board {board_id} deleted", "votes_removed": removed}


@app.patch("/personalboards/{board_id}", response_model=BoardOut)
def rename_personal_board(
    board_id: int, body: PersonalBoardUpdate, user_id: int = Depends(require_user_id),
) -> BoardOut:
    _require_owner(_require_kind(board_id, BoardKind.personal), user_id)
    return _board_out(boards.update_board(board_id, name=body.name))


# ── Team boards ──────────────────────────────────────────────────────────


@app.post("/teamboards", response_model=BoardOut)
def create_team_board(
    body: TeamBoardRequest, user_id: int = Depends(require_user_id),
) -> BoardOut:
    board = boards.create_board(
        BoardKind.team,
        body.team_board_name,
        user_id,
        team_name=body.team_name,
        team_members_num=body.team_members_num,
    )
    return _board_out(board)


@app.get("/teamboards", response_model=list[BoardOut])
def list_team_boards(user_id: int = Depends(require_user_id)) -> list[BoardOut]:
    return [_board_out(b) for b in boards.list_boards_for_user(user_id, BoardKind.team)]


@app.delete("/teamboards/{board_id}")
def delete_team_board(board_id: int, user_id: int = Depends(require_user_id)) -> dict:
    _require_owner(_require_kind(board_id, BoardKind.team), user_id)
    removed = boards.delete_board(board_id)
    return {"message": f"Team board {board_id} deleted", "votes_removed": removed}


@app.get("/teamboards/{board_id}", response_model=TeamBoardDetail)
def get_team_board(board_id: int, user_id: int = Depends(require_user_id)) -> TeamBoardDetail:
    board = _require_kind(board_id, BoardKind.team)
    if not boards.is_member(board, user_id):
        raise HTTPException(status_code=403, detail="Only board members can view this board")
    return TeamBoardDetail(board=_board_out(board), categories=list_by_board_grouped(board_id))


@app.patch("/teamboards/{board_id}", response_model=BoardOut)
def update_team_board(
    board_id: int, body: TeamBoardUpdate, user_id: int = Depends(require_user_id),
) -> BoardOut:
    _require_owner(_require_kind(board_id, BoardKind.team), user_id)
    board = boards.update_board(
        board_id,
        name=body.team_board_name,
        team_name=body.team_name,
        team_members_num=body.team_members_num,
    )
    return _board_out(board)


@app.post("/teamboards/{board_id}/members")
def join_team_board(board_id: int, user_id: int = Depends(require_user_id)) -> dict:
    _require_kind(board_id, BoardKind.team)
    boards.add_member(board_id, user_id)
    return {"status": "joined", "board_id": board_id}


@app.post("/teamboards/{board_id}/menus", response_model=SlotOut)
def add_team_board_menu(
    board_id: int, body: SlotRequest, user_id: int = Depends(require_user_id),
) -> SlotOut:
    board = _require_kind(board_id, BoardKind.team)
    if not boards.is_member(board, user_id):
        raise HTTPException(status_code=403, detail="Only board members can add menus")
    if get_menu(body.menu_id) is None:
        raise MenuNotFound(f"Menu not found (menu id: {body.menu_id})")
    slot = boards.add_slot(board_id, body.menu_id, added_by=user_id)
    return SlotOut(slot_id=slot.slot_id, board_id=slot.board_id, menu_id=slot.menu_id)


@app.post("/teamboards/{board_id}/recommend", response_model=list[CategoryGroup])
def team_board_recommend(
    board_id: int, body: RecommendOptions, user_id: int = Depends(require_user_id),
) -> list[CategoryGroup]:
    _require_owner(_require_kind(board_id, BoardKind.team), user_id)
    return recommend(board_id, body)


@app.get("/teamboards/{board_id}/categories", response_model=list[CategoryGroup])
def team_board_categories(
    board_id: int, user_id: int = Depends(require_user_id),
) -> list[CategoryGroup]:
    _require_kind(board_id, BoardKind.team)
    return list_by_board_grouped(board_id)


# ── Votes ────────────────────────────────────────────────────────────────


@app.post("/teamboards/{board_id}/votes", response_model=list[VoteOut])
def cast_votes(
    board_id: int, body: VoteRequest, user_id: int = Depends(require_user_id),
) -> list[VoteOut]:
    _require_kind(board_id, BoardKind.team)
    return [_vote_out(v) for v in ledger.cast_votes(user_id, board_id, body.menu_ids)]


@app.put("/teamboards/{board_id}/votes", response_model=list[VoteOut])
def replace_votes(
    board_id: int, body: VoteRequest, user_id: int = Depends(require_user_id),
) -> list[VoteOut]:
    _require_kind(board_id, BoardKind.team)
    return [_vote_out(v) for v in ledger.replace_votes(user_id, board_id, body.menu_ids)]


@app.get("/teamboards/{board_id}/votes/me", response_model=list[VoteOut])
def my_votes(board_id: int, user_id: int = Depends(require_user_id)) -> list[VoteOut]:
    _require_kind(board_id, BoardKind.team)
    return [_vote_out(v) for v in ledger.list_user_votes(user_id, board_id)]


@app.get("/teamboards/{board_id}/votes/results", response_model=VoteResult)
def vote_results(board_id: int, user_id: int = Depends(require_user_id)) -> VoteResult:
    _require_kind(board_id, BoardKind.team)
    return tally(board_id, user_id)


@app.get("/teamboards/{board_id}/votes/quorum", response_model=QuorumResult)
def vote_quorum(board_id: int, user_id: int = Depends(require_user_id)) -> QuorumResult:
    _require_kind(board_id, BoardKind.team)
    return quorum(board_id)


@app.delete("/votes/{vote_id}")
def delete_vote(vote_id: int, user_id: int = Depends(require_user_id)) -> dict:
    vote = vote_store.get_vote(vote_id)
    if vote is not None and vote.user_id != user_id:
        raise HTTPException(status_code=403, detail="You can only delete your own votes")
    ledger.delete_vote(vote_id)
    return {"message": f"Vote {vote_id} deleted"}


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
