"""Feed schemas."""

from __future__ import annotations

from pydantic import BaseModel

from cineconnect.schemas.film import FilmOut
from cineconnect.schemas.review import ReviewWithAuthor


class FeedResponse(BaseModel):
    reviews: list[ReviewWithAuthor] = []
    top_films: list[FilmOut] = []
    recent_films: list[FilmOut] = []
