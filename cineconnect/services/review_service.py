"""Review service: ratings, film aggregates, likes and replies."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cineconnect.core.errors import BadRequestError, ForbiddenError, NotFoundError, ValidationError
from cineconnect.models.comment_reply import CommentReply
from cineconnect.models.film import Film
from cineconnect.models.review import Review
from cineconnect.models.review_like import ReviewLike
from cineconnect.models.user import User, UserRole
from cineconnect.services.film_service import import_film

logger = logging.getLogger(__name__)

RECENT_LIMIT = 20

# Site roles allowed to delete other people's replies
REPLY_MODERATOR_ROLES = (UserRole.moderator.value, UserRole.admin.value)


def refresh_film_rating(db: Session, film_id: int) -> None:
    """Recompute the film's average rating and review count. Does not commit."""
    db.flush()
    avg, count = db.execute(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.film_id == film_id)
    ).one()
    film = db.get(Film, film_id)
    if film is None:
        return
    film.average_rating = round(float(avg), 2) if avg is not None else 0.0
    film.review_count = count


def _resolve_film_id(db: Session, film_id: int | None, tmdb_id: int | None) -> int:
    if film_id is not None:
        if db.get(Film, film_id) is None:
            raise NotFoundError("Film not found")
        return film_id
    if tmdb_id is not None:
        film = import_film(db, tmdb_id)
        if film is None:
            raise NotFoundError("Film not found")
        return film.id
    raise ValidationError("Provide film_id or tmdb_id")


def _find_review(db: Session, user_id: int, film_id: int) -> Review | None:
    return db.execute(
        select(Review).where(Review.user_id == user_id, Review.film_id == film_id)
    ).scalar_one_or_none()


def upsert_review(
    db: Session,
    user_id: int,
    rating: int,
    comment: str | None = None,
    film_id: int | None = None,
    tmdb_id: int | None = None,
) -> Review:
    """Create or update the user's review of a film and refresh the film aggregate."""
    if not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")
    comment = comment.strip() if comment else None
    resolved_film_id = _resolve_film_id(db, film_id, tmdb_id)

    review = _find_review(db, user_id, resolved_film_id)
    created = review is None
    if created:
        review = Review(user_id=user_id, film_id=resolved_film_id, rating=rating, comment=comment)
        db.add(review)
        try:
            db.flush()
        except IntegrityError:
            # Lost a race with a concurrent submission; update that row instead
            db.rollback()
            resolved_film_id = _resolve_film_id(db, film_id, tmdb_id)
            review = _find_review(db, user_id, resolved_film_id)
            if review is None:
                raise
            created = False
    if not created:
        review.rating = rating
        review.comment = comment

    refresh_film_rating(db, resolved_film_id)
    db.commit()
    db.refresh(review)
    logger.info("Review %s %s by user=%s film=%s", review.id, "created" if created else "updated", user_id, resolved_film_id)
    return review


def get_review_or_404(db: Session, review_id: int) -> Review:
    review = db.get(Review, review_id)
    if not review:
        raise NotFoundError("Review not found")
    return review


def _likes_subquery():
    return (
        select(ReviewLike.review_id, func.count(ReviewLike.id).label("likes"))
        .group_by(ReviewLike.review_id)
        .subquery()
    )


def review_rows(db: Session, *criteria, limit: int | None = None) -> list[tuple[Review, User, Film, int]]:
    """Reviews joined with author, film and like count, newest first."""
    likes = _likes_subquery()
    stmt = (
        select(Review, User, Film, func.coalesce(likes.c.likes, 0))
        .join(User, User.id == Review.user_id)
        .join(Film, Film.id == Review.film_id)
        .outerjoin(likes, likes.c.review_id == Review.id)
        .where(*criteria)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return [tuple(row) for row in db.execute(stmt).all()]


def get_review_with_author(db: Session, review_id: int) -> tuple[Review, User, Film, int]:
    rows = review_rows(db, Review.id == review_id)
    if not rows:
        raise NotFoundError("Review not found")
    return rows[0]


def list_user_reviews(db: Session, user_id: int) -> list[tuple[Review, User, Film, int]]:
    return review_rows(db, Review.user_id == user_id)


def recent_reviews(db: Session, limit: int = RECENT_LIMIT) -> list[tuple[Review, User, Film, int]]:
    """Latest reviews that carry a comment."""
    return review_rows(db, Review.comment.is_not(None), Review.comment != "", limit=limit)


def like_count(db: Session, review_id: int) -> int:
    return db.scalar(select(func.count(ReviewLike.id)).where(ReviewLike.review_id == review_id)) or 0


def like_status(db: Session, review_id: int, user_id: int | None) -> dict:
    get_review_or_404(db, review_id)
    liked = False
    if user_id is not None:
        liked = (
            db.execute(
                select(ReviewLike.id).where(ReviewLike.review_id == review_id, ReviewLike.user_id == user_id)
            ).first()
            is not None
        )
    return {"liked": liked, "likes_count": like_count(db, review_id)}


def toggle_like(db: Session, review_id: int, user_id: int) -> dict:
    """Like the review, or remove the like if already present."""
    get_review_or_404(db, review_id)
    removed = db.execute(
        delete(ReviewLike).where(ReviewLike.review_id == review_id, ReviewLike.user_id == user_id)
    ).rowcount
    if not removed:
        db.add(ReviewLike(review_id=review_id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        # Concurrent like from the same user already landed
        db.rollback()
    return {"liked": not removed, "likes_count": like_count(db, review_id)}


def create_reply(db: Session, review_id: int, user_id: int, message: str) -> CommentReply:
    text = (message or "").strip()
    if not text:
        raise BadRequestError("Reply message is required")
    get_review_or_404(db, review_id)
    reply = CommentReply(parent_review_id=review_id, user_id=user_id, message=text)
    db.add(reply)
    db.commit()
    db.refresh(reply)
    return reply


def list_replies(db: Session, review_id: int) -> list[tuple[CommentReply, User]]:
    get_review_or_404(db, review_id)
    rows = db.execute(
        select(CommentReply, User)
        .join(User, User.id == CommentReply.user_id)
        .where(CommentReply.parent_review_id == review_id)
        .order_by(CommentReply.created_at, CommentReply.id)
    ).all()
    return [(reply, user) for reply, user in rows]


def delete_reply(db: Session, reply_id: int, actor: User) -> None:
    reply = db.get(CommentReply, reply_id)
    if not reply:
        raise NotFoundError("Reply not found")
    if reply.user_id != actor.id and actor.role not in REPLY_MODERATOR_ROLES:
        raise ForbiddenError("You can only delete your own replies")
    db.delete(reply)
    db.commit()
    logger.info("Reply %s deleted by user=%s", reply_id, actor.id)
