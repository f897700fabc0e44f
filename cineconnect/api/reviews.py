"""Reviews, likes and replies."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cineconnect.core.deps import get_current_user, get_optional_user
from cineconnect.db.session import get_db
from cineconnect.models.comment_reply import CommentReply
from cineconnect.models.film import Film
from cineconnect.models.review import Review
from cineconnect.models.user import User
from cineconnect.schemas.auth import MessageResponse
from cineconnect.schemas.review import LikeStatus, ReplyCreate, ReplyOut, ReviewCreate, ReviewResponse, ReviewWithAuthor
from cineconnect.schemas.user import UserSummary
from cineconnect.services import review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])
replies_router = APIRouter(prefix="/replies", tags=["reviews"])


def review_out(review: Review, author: User, film: Film, likes: int) -> ReviewWithAuthor:
    return ReviewWithAuthor(
        id=review.id,
        user_id=review.user_id,
        film_id=review.film_id,
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
        updated_at=review.updated_at,
        author=UserSummary.model_validate(author),
        film_title=film.title,
        poster_url=film.poster_url,
        likes_count=likes,
    )


def reply_out(reply: CommentReply, author: User) -> ReplyOut:
    return ReplyOut(
        id=reply.id,
        parent_review_id=reply.parent_review_id,
        user_id=reply.user_id,
        message=reply.message,
        created_at=reply.created_at,
        author=UserSummary.model_validate(author),
    )


@router.post("", response_model=ReviewResponse)
def submit_review(
    data: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Rate a film; a second submission for the same film updates the review."""
    return review_service.upsert_review(
        db,
        current_user.id,
        rating=data.rating,
        comment=data.comment,
        film_id=data.film_id,
        tmdb_id=data.tmdb_id,
    )


@router.get("/my", response_model=list[ReviewWithAuthor])
def my_reviews(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [review_out(*row) for row in review_service.list_user_reviews(db, current_user.id)]


@router.get("/recent", response_model=list[ReviewWithAuthor])
def recent_reviews(db: Session = Depends(get_db)):
    return [review_out(*row) for row in review_service.recent_reviews(db)]


@router.get("/{review_id}", response_model=ReviewWithAuthor)
def get_review(review_id: int, db: Session = Depends(get_db)):
    return review_out(*review_service.get_review_with_author(db, review_id))


@router.post("/{review_id}/like", response_model=LikeStatus)
def toggle_like(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Like or unlike a review."""
    return review_service.toggle_like(db, review_id, current_user.id)


@router.get("/{review_id}/like-status", response_model=LikeStatus)
def like_status(
    review_id: int,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    return review_service.like_status(db, review_id, viewer.id if viewer else None)


@router.post("/{review_id}/replies", response_model=ReplyOut)
def create_reply(
    review_id: int,
    data: ReplyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    reply = review_service.create_reply(db, review_id, current_user.id, data.message)
    return reply_out(reply, current_user)


@router.get("/{review_id}/replies", response_model=list[ReplyOut])
def list_replies(review_id: int, db: Session = Depends(get_db)):
    return [reply_out(reply, author) for reply, author in review_service.list_replies(db, review_id)]


@replies_router.delete("/{reply_id}", response_model=MessageResponse)
def delete_reply(
    reply_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Authors delete their replies; site moderators and admins delete any."""
    review_service.delete_reply(db, reply_id, current_user)
    return MessageResponse(message="Reply deleted")
