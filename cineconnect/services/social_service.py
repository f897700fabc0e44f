"""Social graph service: friend requests, friendships and follows."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import and_, case, delete, func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cineconnect.core.errors import (
    AlreadyFollowingError,
    AlreadyFriendsError,
    BadRequestError,
    DuplicateRequestError,
    NotFoundError,
    SelfReferenceError,
)
from cineconnect.models.follow import Follow
from cineconnect.models.friend_request import FriendRequest, FriendRequestStatus
from cineconnect.models.friendship import Friendship
from cineconnect.models.group_membership import GroupMembership
from cineconnect.models.review import Review
from cineconnect.models.user import User
from cineconnect.services.auth_service import get_user_or_404

logger = logging.getLogger(__name__)

PENDING = FriendRequestStatus.pending.value

# Dialects that support INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _pair_clause(a: int, b: int):
    user1, user2 = Friendship.ordered(a, b)
    return and_(Friendship.user1_id == user1, Friendship.user2_id == user2)


def get_friendship(db: Session, a: int, b: int) -> Friendship | None:
    return db.execute(select(Friendship).where(_pair_clause(a, b))).scalar_one_or_none()


def are_friends(db: Session, a: int, b: int) -> bool:
    return get_friendship(db, a, b) is not None


def friend_ids(db: Session, user_id: int) -> list[int]:
    """Ids of every friend of user_id, whichever side of the pair they sit on."""
    rows = db.execute(
        select(Friendship.user1_id, Friendship.user2_id).where(
            or_(Friendship.user1_id == user_id, Friendship.user2_id == user_id)
        )
    ).all()
    return [u2 if u1 == user_id else u1 for u1, u2 in rows]


def _pending_request(db: Session, requester_id: int, receiver_id: int) -> FriendRequest | None:
    return db.execute(
        select(FriendRequest)
        .where(
            FriendRequest.requester_id == requester_id,
            FriendRequest.receiver_id == receiver_id,
            FriendRequest.status == PENDING,
        )
        .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
    ).scalars().first()


def send_friend_request(db: Session, requester_id: int, target_id: int) -> FriendRequest:
    """Create a pending request from requester to target."""
    if requester_id == target_id:
        raise SelfReferenceError("You cannot send a friend request to yourself")
    get_user_or_404(db, target_id)
    if are_friends(db, requester_id, target_id):
        raise AlreadyFriendsError()
    if _pending_request(db, requester_id, target_id):
        raise DuplicateRequestError("You already sent a friend request to this user")
    if _pending_request(db, target_id, requester_id):
        raise DuplicateRequestError("This user already sent you a friend request")

    request = FriendRequest(requester_id=requester_id, receiver_id=target_id, status=PENDING)
    db.add(request)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateRequestError("You already sent a friend request to this user")
    db.refresh(request)
    logger.info("Friend request %s: %s -> %s", request.id, requester_id, target_id)
    return request


def _insert_friendship(db: Session, a: int, b: int) -> None:
    """Insert the canonical row for (a, b); a no-op when it already exists."""
    user1, user2 = Friendship.ordered(a, b)
    insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        db.execute(
            insert(Friendship)
            .values(user1_id=user1, user2_id=user2)
            .on_conflict_do_nothing(index_elements=["user1_id", "user2_id"])
        )
        return
    try:
        with db.begin_nested():
            db.add(Friendship(user1_id=user1, user2_id=user2))
    except IntegrityError:
        logger.info("Friendship %s-%s already exists", user1, user2)


def accept_friend_request(db: Session, receiver_id: int, requester_id: int) -> Friendship:
    """Receiver accepts the pending request sent by requester."""
    request = _pending_request(db, requester_id, receiver_id)
    if not request:
        raise NotFoundError("Friend request not found")
    request.status = FriendRequestStatus.accepted.value
    _insert_friendship(db, requester_id, receiver_id)
    db.commit()
    friendship = get_friendship(db, requester_id, receiver_id)
    logger.info("Friendship created between %s and %s", requester_id, receiver_id)
    return friendship


def reject_friend_request(db: Session, receiver_id: int, requester_id: int) -> FriendRequest:
    request = _pending_request(db, requester_id, receiver_id)
    if not request:
        raise NotFoundError("Friend request not found")
    request.status = FriendRequestStatus.rejected.value
    db.commit()
    db.refresh(request)
    logger.info("Friend request %s rejected", request.id)
    return request


def get_friends(db: Session, user_id: int) -> list[tuple[User, datetime]]:
    """Friends of user_id with the date the friendship started, newest first."""
    other_id = case((Friendship.user1_id == user_id, Friendship.user2_id), else_=Friendship.user1_id)
    rows = db.execute(
        select(User, Friendship.created_at)
        .join(Friendship, User.id == other_id)
        .where(or_(Friendship.user1_id == user_id, Friendship.user2_id == user_id))
        .order_by(Friendship.created_at.desc(), Friendship.id.desc())
    ).all()
    return [(user, since) for user, since in rows]


def get_friend_requests(db: Session, user_id: int) -> list[tuple[FriendRequest, User]]:
    """Pending requests received by user_id with each requester."""
    rows = db.execute(
        select(FriendRequest, User)
        .join(User, User.id == FriendRequest.requester_id)
        .where(FriendRequest.receiver_id == user_id, FriendRequest.status == PENDING)
        .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
    ).all()
    return [(req, user) for req, user in rows]


def _count(model, where):
    return select(func.count()).select_from(model).where(where).correlate(User).scalar_subquery()


def discover_profiles(
    db: Session,
    viewer_id: int,
    search: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> list[dict]:
    """Users the viewer may want to befriend.

    Excludes the viewer, current friends, and users with a pending request
    sent by the viewer. Users who sent the viewer a pending request stay in
    the list, flagged can_accept.
    """
    is_friend = (
        select(Friendship.id)
        .where(
            or_(
                and_(Friendship.user1_id == viewer_id, Friendship.user2_id == User.id),
                and_(Friendship.user1_id == User.id, Friendship.user2_id == viewer_id),
            )
        )
        .exists()
    )
    sent_pending = (
        select(FriendRequest.id)
        .where(
            FriendRequest.requester_id == viewer_id,
            FriendRequest.receiver_id == User.id,
            FriendRequest.status == PENDING,
        )
        .exists()
    )
    received_request_id = (
        select(FriendRequest.id)
        .where(
            FriendRequest.requester_id == User.id,
            FriendRequest.receiver_id == viewer_id,
            FriendRequest.status == PENDING,
        )
        .order_by(FriendRequest.id.desc())
        .limit(1)
        .correlate(User)
        .scalar_subquery()
    )

    conditions = [User.id != viewer_id, ~is_friend, ~sent_pending]
    if search and search.strip():
        conditions.append(func.lower(User.display_name).contains(search.strip().lower(), autoescape=True))

    stmt = (
        select(
            User,
            _count(Review, Review.user_id == User.id).label("review_count"),
            _count(GroupMembership, GroupMembership.user_id == User.id).label("group_count"),
            _count(Follow, Follow.followee_id == User.id).label("followers_count"),
            _count(Follow, Follow.follower_id == User.id).label("following_count"),
            received_request_id.label("received_request_id"),
        )
        .where(*conditions)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(limit)
        .offset(offset)
    )

    profiles = []
    for user, reviews, groups, followers, following, received_id in db.execute(stmt).all():
        profiles.append(
            {
                "id": user.id,
                "display_name": user.display_name,
                "photo_url": user.photo_url,
                "bio": user.bio,
                "review_count": reviews,
                "group_count": groups,
                "followers_count": followers,
                "following_count": following,
                "friend_status": "can_accept" if received_id is not None else "none",
                "received_request_id": received_id,
            }
        )
    return profiles


def is_following(db: Session, follower_id: int, followee_id: int) -> bool:
    return (
        db.execute(
            select(Follow.id).where(Follow.follower_id == follower_id, Follow.followee_id == followee_id)
        ).first()
        is not None
    )


def follow_user(db: Session, follower_id: int, followee_id: int) -> Follow:
    if follower_id == followee_id:
        raise SelfReferenceError("You cannot follow yourself")
    get_user_or_404(db, followee_id)
    if is_following(db, follower_id, followee_id):
        raise AlreadyFollowingError()
    follow = Follow(follower_id=follower_id, followee_id=followee_id)
    db.add(follow)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyFollowingError()
    db.refresh(follow)
    logger.info("User %s now follows %s", follower_id, followee_id)
    return follow


def unfollow_user(db: Session, follower_id: int, followee_id: int) -> None:
    if follower_id == followee_id:
        raise SelfReferenceError("You cannot unfollow yourself")
    result = db.execute(
        delete(Follow).where(Follow.follower_id == follower_id, Follow.followee_id == followee_id)
    )
    if result.rowcount == 0:
        db.rollback()
        raise BadRequestError("You do not follow this user")
    db.commit()
    logger.info("User %s unfollowed %s", follower_id, followee_id)


def follow_counts(db: Session, user_id: int) -> tuple[int, int]:
    """(followers, following) for user_id."""
    followers = db.scalar(select(func.count(Follow.id)).where(Follow.followee_id == user_id)) or 0
    following = db.scalar(select(func.count(Follow.id)).where(Follow.follower_id == user_id)) or 0
    return followers, following
