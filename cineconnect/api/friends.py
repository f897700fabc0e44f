"""Friend requests, friends list and profile discovery."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cineconnect.core.deps import get_current_user
from cineconnect.db.session import get_db
from cineconnect.models.user import User
from cineconnect.schemas.friend import (
    DiscoverProfile,
    FriendOut,
    FriendRequestResponse,
    FriendRequestWithUser,
    FriendshipResponse,
)
from cineconnect.services.social_service import (
    accept_friend_request,
    discover_profiles,
    get_friend_requests,
    get_friends,
    reject_friend_request,
    send_friend_request,
)

router = APIRouter(tags=["friends"])


@router.post("/friend-requests/{target_id}", response_model=FriendRequestResponse)
def send_request(
    target_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Send a friend request to target_id."""
    return send_friend_request(db, current_user.id, target_id)


@router.post("/friend-requests/{requester_id}/accept", response_model=FriendshipResponse)
def accept_request(
    requester_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Accept the pending request sent by requester_id."""
    return accept_friend_request(db, current_user.id, requester_id)


@router.post("/friend-requests/{requester_id}/reject", response_model=FriendRequestResponse)
def reject_request(
    requester_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return reject_friend_request(db, current_user.id, requester_id)


@router.get("/friend-requests", response_model=list[FriendRequestWithUser])
def received_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Pending requests received by the current user."""
    return [
        FriendRequestWithUser(
            id=req.id,
            requester_id=req.requester_id,
            receiver_id=req.receiver_id,
            status=req.status,
            created_at=req.created_at,
            requester_name=requester.display_name,
            requester_photo_url=requester.photo_url,
        )
        for req, requester in get_friend_requests(db, current_user.id)
    ]


@router.get("/friends", response_model=list[FriendOut])
def friends(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [
        FriendOut(
            id=friend.id,
            display_name=friend.display_name,
            photo_url=friend.photo_url,
            bio=friend.bio,
            friends_since=since,
        )
        for friend, since in get_friends(db, current_user.id)
    ]


@router.get("/discover", response_model=list[DiscoverProfile])
def discover(
    search: str | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Profiles the current user is not yet connected with."""
    return discover_profiles(db, current_user.id, search=search, limit=limit, offset=offset)
