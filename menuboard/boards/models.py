from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ..recommendations.models import ApiModel, CategoryGroup


class BoardKind(str, Enum):
    personal = "personal"
    team = "team"


class Board(BaseModel):
    board_id: int
    kind: BoardKind
    name: str
    owner_id: int
    team_name: str | None = None
    team_members_num: int = 1
    created_at: datetime = Field(default_factory=datetime.now)


class BoardMenuSlot(BaseModel):
    slot_id: int
    board_id: int
    menu_id: int
    added_by: int | None = None


class PersonalBoardRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)


class TeamBoardRequest(ApiModel):
    team_name: str = Field(..., min_length=1, max_length=100)
    team_members_num: int = Field(..., ge=1, le=100)
    team_board_name: str = Field(..., min_length=1, max_length=100)


class SlotRequest(ApiModel):
    menu_id: int


class BoardOut(ApiModel):
    board_id: int
    kind: BoardKind
    name: str
    owner_id: int
    team_name: str | None = None
    team_members_num: int
    created_date: datetime


class SlotOut(ApiModel):
    slot_id: int
    board_id: int
    menu_id: int


class PersonalBoardUpdate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)


class TeamBoardUpdate(ApiModel):
    team_name: str | None = Field(default=None, min_length=1, max_length=100)
    team_members_num: int | None = Field(default=None, ge=1, le=100)
    team_board_name: str | None = Field(default=None, min_length=1, max_length=100)


class TeamBoardDetail(ApiModel):
    board: BoardOut
    categories: list[CategoryGroup]
