"""User profile, favorites and follow endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cineconnect.core.deps import get_current_user, get_optional_user
from cineconnect.db.session import get_db
from cineconnect.models.user import User
from cineconnect.schemas.auth import UserMe
from cineconnect.schemas.user import FavoriteFilmOut, FollowResponse, UpdateProfileRequest, UserGroupOut, UserProfile
from cineconnect.services.auth_service import get_user_or_404
from cineconnect.services.group_service import user_groups
from cineconnect.services.social_service import follow_user, unfollow_user
from cineconnect.services.user_service import add_favorite, get_profile, remove_favorite, update_profile

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/profile", response_model=UserProfile)
def profile(
    user_id: int,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    return get_profile(db, user_id, viewer.id if viewer else None)


@router.put("/me", response_model=UserMe)
def update_me(
    data: UpdateProfileRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update current user's profile."""
    return update_profile(db, current_user, data.model_dump(exclude_unset=True))


@router.get("/{user_id}/groups", response_model=list[UserGroupOut])
def groups_of_user(
    user_id: int,
    db: Session = Depends(get_db),
):
    get_user_or_404(db, user_id)
    return user_groups(db, user_id)


@router.post("/me/favorites/{film_id}", response_model=list[FavoriteFilmOut])
def add_favorite_film(
    film_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return add_favorite(db, current_user.id, film_id)


@router.delete("/me/favorites/{film_id}", response_model=list[FavoriteFilmOut])
def remove_favorite_film(
    film_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return remove_favorite(db, current_user.id, film_id)


@router.post("/{user_id}/follow", response_model=FollowResponse)
def follow(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    follow_user(db, current_user.id, user_id)
    return FollowResponse(follower_id=current_user.id, followee_id=user_id, following=True)


@router.delete("/{user_id}/follow", response_model=FollowResponse)
def unfollow(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    unfollow_user(db, current_user.id, user_id)
    return FollowResponse(follower_id=current_user.id, followee_id=user_id, following=False)
