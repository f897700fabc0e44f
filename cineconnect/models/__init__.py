"""SQLAlchemy models."""

from __future__ import annotations

from cineconnect.models.comment_reply import CommentReply
from cineconnect.models.favorite_film import FavoriteFilm
from cineconnect.models.film import Film
from cineconnect.models.follow import Follow
from cineconnect.models.friend_request import FriendRequest
from cineconnect.models.friendship import Friendship
from cineconnect.models.group import Group
from cineconnect.models.group_film import GroupFilm
from cineconnect.models.group_invitation import GroupInvitation
from cineconnect.models.group_membership import GroupMembership
from cineconnect.models.group_message import GroupMessage
from cineconnect.models.notification import Notification
from cineconnect.models.reported_content import ReportedContent
from cineconnect.models.review import Review
from cineconnect.models.review_like import ReviewLike
from cineconnect.models.user import User

__all__ = [
    "User",
    "Film",
    "FavoriteFilm",
    "Review",
    "ReviewLike",
    "CommentReply",
    "FriendRequest",
    "Friendship",
    "Follow",
    "Group",
    "GroupMembership",
    "GroupInvitation",
    "GroupFilm",
    "GroupMessage",
    "ReportedContent",
    "Notification",
]
