"""Group, membership and invitation schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from cineconnect.schemas.user import UserSummary


class GroupCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    cover_image_url: str | None = None
    theme: str | None = None
    is_public: bool = True


class GroupUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    cover_image_url: str | None = None
    theme: str | None = None
    is_public: bool | None = None


class GroupResponse(BaseModel):
    id: int
    owner_id: int
    title: str
    description: str | None = None
    cover_image_url: str | None = None
    theme: str | None = None
    is_public: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class GroupListItem(GroupResponse):
    owner_name: str = ""
    member_count: int = 0
    film_count: int = 0
    user_role: str | None = None


class GroupMemberOut(UserSummary):
    role: str
    joined_at: datetime


class GroupFilmOut(BaseModel):
    film_id: int
    tmdb_id: int | None = None
    title: str
    poster_url: str | None = None
    added_by: int
    added_at: datetime


class GroupDetails(GroupListItem):
    members: list[GroupMemberOut] = []
    films: list[GroupFilmOut] = []


class MembershipResponse(BaseModel):
    id: int
    group_id: int
    user_id: int
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}


class InviteRequest(BaseModel):
    email: EmailStr


class InvitationResponse(BaseModel):
    id: int
    group_id: int
    inviter_id: int
    invitee_id: int
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class InvitationWithGroup(InvitationResponse):
    group_title: str = ""
    inviter_name: str = ""


class AddFilmRequest(BaseModel):
    film_id: int


class GroupFilmResponse(BaseModel):
    id: int
    group_id: int
    film_id: int
    added_by: int
    created_at: datetime

    model_config = {"from_attributes": True}
