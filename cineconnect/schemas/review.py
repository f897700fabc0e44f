"""Review, like and reply schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from cineconnect.schemas.user import UserSummary


class ReviewCreate(BaseModel):
    film_id: int | None = None
    tmdb_id: int | None = None
    rating: int = Field(ge=1, le=5)
    comment: str | None = None

    @model_validator(mode="after")
    def _film_reference(self):
        if self.film_id is None and self.tmdb_id is None:
            raise ValueError("Provide film_id or tmdb_id")
        return self


class ReviewResponse(BaseModel):
    id: int
    user_id: int
    film_id: int
    rating: int
    comment: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ReviewWithAuthor(ReviewResponse):
    author: UserSummary
    film_title: str = ""
    poster_url: str | None = None
    likes_count: int = 0


class LikeStatus(BaseModel):
    liked: bool
    likes_count: int


class ReplyCreate(BaseModel):
    message: str


class ReplyOut(BaseModel):
    id: int
    parent_review_id: int
    user_id: int
    message: str
    created_at: datetime
    author: UserSummary
