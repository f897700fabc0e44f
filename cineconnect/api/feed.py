"""Home feed endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cineconnect.api.reviews import review_out
from cineconnect.core.deps import get_current_user
from cineconnect.db.session import get_db
from cineconnect.models.user import User
from cineconnect.schemas.feed import FeedResponse
from cineconnect.schemas.film import FilmOut
from cineconnect.services.feed_service import friends_feed, global_feed

router = APIRouter(prefix="/feed", tags=["feed"])


def _feed_out(feed: dict) -> FeedResponse:
    return FeedResponse(
        reviews=[review_out(*row) for row in feed["reviews"]],
        top_films=[FilmOut.model_validate(f) for f in feed["top_films"]],
        recent_films=[FilmOut.model_validate(f) for f in feed["recent_films"]],
    )


@router.get("", response_model=FeedResponse)
def feed(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Reviews from the current user's friends."""
    return _feed_out(friends_feed(db, current_user.id))


@router.get("/global", response_model=FeedResponse)
def feed_global(db: Session = Depends(get_db)):
    return _feed_out(global_feed(db))
