"""Film schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel

from cineconnect.schemas.review import ReplyOut
from cineconnect.schemas.user import UserSummary


class FilmOut(BaseModel):
    id: int | None = None
    tmdb_id: int | None = None
    title: str
    original_title: str | None = None
    synopsis: str | None = None
    release_date: date | None = None
    runtime: int | None = None
    poster_url: str | None = None
    public_rating: float = 0.0
    public_votes: int = 0
    average_rating: float = 0.0
    review_count: int = 0
    genres: list[str] = []
    director: str | None = None
    cast: list[str] = []

    model_config = {"from_attributes": True}


class FilmReview(BaseModel):
    id: int
    rating: int
    comment: str | None = None
    created_at: datetime
    author: UserSummary
    likes_count: int = 0
    replies: list[ReplyOut] = []


class FilmDetails(FilmOut):
    reviews: list[FilmReview] = []
