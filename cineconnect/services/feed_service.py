"""Home feed: recent reviews and film highlights."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from cineconnect.models.film import Film
from cineconnect.models.review import Review
from cineconnect.services.review_service import review_rows
from cineconnect.services.social_service import friend_ids

FEED_REVIEW_LIMIT = 50
HIGHLIGHT_LIMIT = 5


def _highlights(db: Session) -> tuple[list[Film], list[Film]]:
    top = list(
        db.scalars(
            select(Film)
            .where(Film.review_count > 0)
            .order_by(Film.average_rating.desc(), Film.review_count.desc(), Film.id)
            .limit(HIGHLIGHT_LIMIT)
        )
    )
    recent = list(db.scalars(select(Film).order_by(Film.created_at.desc(), Film.id.desc()).limit(HIGHLIGHT_LIMIT)))
    return top, recent


def global_feed(db: Session) -> dict:
    top, recent = _highlights(db)
    reviews = review_rows(db, Review.comment.is_not(None), Review.comment != "", limit=FEED_REVIEW_LIMIT)
    return {"reviews": reviews, "top_films": top, "recent_films": recent}


def friends_feed(db: Session, user_id: int) -> dict:
    """Like the global feed, with reviews limited to the user's friends."""
    top, recent = _highlights(db)
    ids = friend_ids(db, user_id)
    reviews = []
    if ids:
        reviews = review_rows(
            db,
            Review.user_id.in_(ids),
            Review.comment.is_not(None),
            Review.comment != "",
            limit=FEED_REVIEW_LIMIT,
        )
    return {"reviews": reviews, "top_films": top, "recent_films": recent}
