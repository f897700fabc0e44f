"""User profile schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class UserSummary(BaseModel):
    """Author projection embedded in other payloads."""

    id: int
    display_name: str
    photo_url: str | None = None

    model_config = {"from_attributes": True}


class FavoriteFilmOut(BaseModel):
    film_id: int
    tmdb_id: int | None = None
    title: str
    poster_url: str | None = None
    position: int


class ProfileReview(BaseModel):
    id: int
    film_id: int
    film_title: str
    rating: int
    comment: str | None = None
    created_at: datetime


class ProfileStats(BaseModel):
    review_count: int = 0
    group_count: int = 0
    followers_count: int = 0
    following_count: int = 0


class UserProfile(BaseModel):
    id: int
    display_name: str
    # Only shown to the profile owner
    email: str | None = None
    photo_url: str | None = None
    bio: str | None = None
    genre_preferences: list[str] = []
    role: str
    created_at: datetime
    stats: ProfileStats
    favorite_films: list[FavoriteFilmOut] = []
    recent_reviews: list[ProfileReview] = []
    is_following: bool = False


class UpdateProfileRequest(BaseModel):
    display_name: str | None = Field(default=None, min_length=2, max_length=100)
    bio: str | None = None
    photo_url: str | None = None
    genre_preferences: list[str] | None = None


class UserGroupOut(BaseModel):
    id: int
    title: str
    description: str | None = None
    theme: str | None = None
    is_public: bool
    role: str
    member_count: int = 0


class FollowResponse(BaseModel):
    follower_id: int
    followee_id: int
    following: bool
