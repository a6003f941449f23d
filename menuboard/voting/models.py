from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..recommendations.models import ApiModel


class Vote(BaseModel):
    vote_id: int
    board_id: int
    user_id: int
    menu_id: int
    slot_id: int
    created_at: datetime = Field(default_factory=datetime.now)


class VoteRequest(ApiModel):
    menu_ids: list[int] = Field(default_factory=list)


class VoteOut(ApiModel):
    vote_id: int
    board_id: int
    user_id: int
    menu_id: int
    menu_name: str
    slot_id: int
    created_date: datetime


class MenuVoteCount(ApiModel):
    menu_id: int
    menu_name: str
    vote_value: int


class VoteResult(ApiModel):
    team_name: str
    votes: list[MenuVoteCount]
    vote_date: str
    has_voted: bool = Field(alias="isVote")


class QuorumResult(ApiModel):
    voted_user_count: int
    team_members_num: int
