"""Film model, materialized from the public catalog."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from cineconnect.db.base import Base
from cineconnect.db.types import JSONList


class Film(Base):
    __tablename__ = "films"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tmdb_id: Mapped[int | None] = mapped_column(Integer, unique=True, index=True, nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    original_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    synopsis: Mapped[str | None] = mapped_column(Text, nullable=True)
    release_date: Mapped[date | None] = mapped_column(Date, index=True, nullable=True)
    runtime: Mapped[int | None] = mapped_column(Integer, nullable=True)
    poster_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # Rating published by the catalog (0-10 scale)
    public_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    public_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Aggregate over this site's reviews (1-5 scale)
    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    genres: Mapped[list] = mapped_column(JSONList, nullable=True, default=list)
    director: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cast: Mapped[list] = mapped_column(JSONList, nullable=True, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
