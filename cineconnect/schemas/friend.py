"""Friend request, friendship and discovery schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class FriendRequestResponse(BaseModel):
    id: int
    requester_id: int
    receiver_id: int
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class FriendRequestWithUser(FriendRequestResponse):
    """Pending request with the requester's info."""

    requester_name: str = ""
    requester_photo_url: str | None = None


class FriendshipResponse(BaseModel):
    id: int
    user1_id: int
    user2_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class FriendOut(BaseModel):
    """The other party of a friendship, seen from the viewer."""

    id: int
    display_name: str
    photo_url: str | None = None
    bio: str | None = None
    friends_since: datetime


class DiscoverProfile(BaseModel):
    id: int
    display_name: str
    photo_url: str | None = None
    bio: str | None = None
    review_count: int = 0
    group_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    friend_status: str = "none"  # none | can_accept
    received_request_id: int | None = None
