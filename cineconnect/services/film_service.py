"""Film service: catalog import, listing, search and details."""

from __future__ import annotations

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from cineconnect.core.errors import NotFoundError
from cineconnect.models.comment_reply import CommentReply
from cineconnect.models.film import Film
from cineconnect.models.review import Review
from cineconnect.models.review_like import ReviewLike
from cineconnect.models.user import User
from cineconnect.services.catalog import CATALOG, CatalogMovie, get_catalog_movie, search_catalog

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


def get_film_by_tmdb_id(db: Session, tmdb_id: int) -> Film | None:
    return db.execute(select(Film).where(Film.tmdb_id == tmdb_id)).scalar_one_or_none()


def get_film_or_404(db: Session, film_id: int) -> Film:
    film = db.get(Film, film_id)
    if not film:
        raise NotFoundError("Film not found")
    return film


def _film_from_catalog(movie: CatalogMovie) -> Film:
    return Film(
        tmdb_id=movie.tmdb_id,
        title=movie.title,
        original_title=movie.original_title,
        synopsis=movie.synopsis,
        release_date=movie.release_date,
        runtime=movie.runtime,
        poster_url=movie.poster_url,
        public_rating=movie.public_rating,
        public_votes=movie.public_votes,
        average_rating=0.0,
        review_count=0,
        genres=list(movie.genres),
        director=movie.director,
        cast=list(movie.cast),
    )


def import_film(db: Session, tmdb_id: int) -> Film | None:
    """Return the stored film for tmdb_id, copying it from the catalog if needed.

    Flushes but does not commit; the caller owns the transaction.
    """
    film = get_film_by_tmdb_id(db, tmdb_id)
    if film:
        return film
    movie = get_catalog_movie(tmdb_id)
    if movie is None:
        return None
    film = _film_from_catalog(movie)
    db.add(film)
    db.flush()
    logger.info("Imported film tmdb_id=%s as id=%s", tmdb_id, film.id)
    return film


def import_catalog(db: Session) -> None:
    known = set(db.scalars(select(Film.tmdb_id).where(Film.tmdb_id.is_not(None))))
    missing = [movie for movie in CATALOG if movie.tmdb_id not in known]
    if not missing:
        return
    db.add_all(_film_from_catalog(movie) for movie in missing)
    db.commit()
    logger.info("Imported %s catalog film(s)", len(missing))


def latest_films(db: Session, limit: int = 20) -> list[Film]:
    import_catalog(db)
    return list(
        db.scalars(
            select(Film).order_by(Film.release_date.desc().nulls_last(), Film.id.desc()).limit(limit)
        )
    )


def search_films(db: Session, query: str) -> list[Film | CatalogMovie]:
    """Stored films matching query, then catalog films not stored yet."""
    needle = query.strip().lower()
    if not needle:
        return []
    stored = list(
        db.scalars(
            select(Film)
            .where(
                or_(
                    func.lower(Film.title).contains(needle, autoescape=True),
                    func.lower(Film.original_title).contains(needle, autoescape=True),
                )
            )
            .order_by(Film.title)
            .limit(SEARCH_LIMIT)
        )
    )
    seen = {film.tmdb_id for film in stored if film.tmdb_id is not None}
    extra = [movie for movie in search_catalog(needle) if movie.tmdb_id not in seen]
    return (stored + extra)[:SEARCH_LIMIT]


def resolve_film(db: Session, film_ref: int) -> Film:
    """Find a film by local id, falling back to a catalog tmdb id."""
    film = db.get(Film, film_ref)
    if film:
        return film
    film = import_film(db, film_ref)
    if film is None:
        raise NotFoundError("Film not found")
    db.commit()
    return film


def film_details(db: Session, film_ref: int) -> dict:
    film = resolve_film(db, film_ref)

    likes = (
        select(ReviewLike.review_id, func.count(ReviewLike.id).label("likes"))
        .group_by(ReviewLike.review_id)
        .subquery()
    )
    review_rows = db.execute(
        select(Review, User, func.coalesce(likes.c.likes, 0))
        .join(User, User.id == Review.user_id)
        .outerjoin(likes, likes.c.review_id == Review.id)
        .where(Review.film_id == film.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    ).all()

    review_ids = [review.id for review, _, _ in review_rows]
    replies: dict[int, list[dict]] = {rid: [] for rid in review_ids}
    if review_ids:
        for reply, author in db.execute(
            select(CommentReply, User)
            .join(User, User.id == CommentReply.user_id)
            .where(CommentReply.parent_review_id.in_(review_ids))
            .order_by(CommentReply.created_at, CommentReply.id)
        ).all():
            replies[reply.parent_review_id].append(
                {
                    "id": reply.id,
                    "parent_review_id": reply.parent_review_id,
                    "user_id": reply.user_id,
                    "message": reply.message,
                    "created_at": reply.created_at,
                    "author": author,
                }
            )

    return {
        "film": film,
        "reviews": [
            {
                "id": review.id,
                "rating": review.rating,
                "comment": review.comment,
                "created_at": review.created_at,
                "author": author,
                "likes_count": like_count,
                "replies": replies[review.id],
            }
            for review, author, like_count in review_rows
        ],
    }
