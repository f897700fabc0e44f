"""Group chat message schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from cineconnect.schemas.user import UserSummary


class MessageCreate(BaseModel):
    message: str = Field(min_length=1, max_length=2000)


class GroupMessageOut(BaseModel):
    id: int
    group_id: int
    user_id: int
    message: str
    created_at: datetime
    author: UserSummary
