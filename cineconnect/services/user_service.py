"""User profile service: profile view, edits and favorite films."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cineconnect.core.errors import BadRequestError, ConflictError, NotFoundError
from cineconnect.models.favorite_film import MAX_FAVORITE_FILMS, FavoriteFilm
from cineconnect.models.film import Film
from cineconnect.models.group_membership import GroupMembership
from cineconnect.models.review import Review
from cineconnect.models.user import User
from cineconnect.services.auth_service import get_user_by_display_name, get_user_or_404
from cineconnect.services.social_service import follow_counts, is_following

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("display_name", "bio", "photo_url", "genre_preferences")


def favorite_films(db: Session, user_id: int) -> list[dict]:
    rows = db.execute(
        select(FavoriteFilm, Film)
        .join(Film, Film.id == FavoriteFilm.film_id)
        .where(FavoriteFilm.user_id == user_id)
        .order_by(FavoriteFilm.position, FavoriteFilm.id)
        .limit(MAX_FAVORITE_FILMS)
    ).all()
    return [
        {
            "film_id": film.id,
            "tmdb_id": film.tmdb_id,
            "title": film.title,
            "poster_url": film.poster_url,
            "position": fav.position,
        }
        for fav, film in rows
    ]


def get_profile(db: Session, user_id: int, viewer_id: int | None = None) -> dict:
    user = get_user_or_404(db, user_id)
    review_count = db.scalar(select(func.count(Review.id)).where(Review.user_id == user_id)) or 0
    group_count = db.scalar(
        select(func.count(GroupMembership.id)).where(GroupMembership.user_id == user_id)
    ) or 0
    followers, following = follow_counts(db, user_id)
    recent = db.execute(
        select(Review, Film.title)
        .join(Film, Film.id == Review.film_id)
        .where(Review.user_id == user_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(3)
    ).all()
    return {
        "id": user.id,
        "display_name": user.display_name,
        "email": user.email if viewer_id == user.id else None,
        "photo_url": user.photo_url,
        "bio": user.bio,
        "genre_preferences": user.genre_preferences or [],
        "role": user.role,
        "created_at": user.created_at,
        "stats": {
            "review_count": review_count,
            "group_count": group_count,
            "followers_count": followers,
            "following_count": following,
        },
        "favorite_films": favorite_films(db, user_id),
        "recent_reviews": [
            {
                "id": review.id,
                "film_id": review.film_id,
                "film_title": title,
                "rating": review.rating,
                "comment": review.comment,
                "created_at": review.created_at,
            }
            for review, title in recent
        ],
        "is_following": bool(viewer_id and viewer_id != user_id and is_following(db, viewer_id, user_id)),
    }


def update_profile(db: Session, user: User, changes: dict[str, Any]) -> User:
    changes = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
    if not changes:
        raise BadRequestError("No fields to update")
    new_name = changes.get("display_name")
    if new_name and new_name != user.display_name:
        taken = get_user_by_display_name(db, new_name)
        if taken and taken.id != user.id:
            raise ConflictError("Display name already taken")
    for key, value in changes.items():
        setattr(user, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Display name already taken")
    db.refresh(user)
    logger.info("Profile updated for user=%s: %s", user.id, sorted(changes))
    return user


def add_favorite(db: Session, user_id: int, film_id: int) -> list[dict]:
    if db.get(Film, film_id) is None:
        raise NotFoundError("Film not found")
    current = list(
        db.scalars(select(FavoriteFilm).where(FavoriteFilm.user_id == user_id).order_by(FavoriteFilm.position))
    )
    if any(fav.film_id == film_id for fav in current):
        raise ConflictError("This film is already in your favorites")
    if len(current) >= MAX_FAVORITE_FILMS:
        raise BadRequestError(f"You can only have {MAX_FAVORITE_FILMS} favorite films")
    db.add(FavoriteFilm(user_id=user_id, film_id=film_id, position=len(current)))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("This film is already in your favorites")
    return favorite_films(db, user_id)


def remove_favorite(db: Session, user_id: int, film_id: int) -> list[dict]:
    favorite = db.execute(
        select(FavoriteFilm).where(FavoriteFilm.user_id == user_id, FavoriteFilm.film_id == film_id)
    ).scalar_one_or_none()
    if not favorite:
        raise NotFoundError("Film not in your favorites")
    removed_position = favorite.position
    db.delete(favorite)
    db.flush()
    # Keep positions contiguous
    db.execute(
        update(FavoriteFilm)
        .where(FavoriteFilm.user_id == user_id, FavoriteFilm.position > removed_position)
        .values(position=FavoriteFilm.position - 1)
    )
    db.commit()
    return favorite_films(db, user_id)
