"""Reportable content kinds.

Each kind knows how to check that a row exists, build a preview for the
moderation queue, and delete the row when a moderator asks for it.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from cineconnect.core.errors import BadRequestError
from cineconnect.db.base import Base
from cineconnect.models.comment_reply import CommentReply
from cineconnect.models.film import Film
from cineconnect.models.group import Group
from cineconnect.models.group_message import GroupMessage
from cineconnect.models.reported_content import ContentType
from cineconnect.models.review import Review
from cineconnect.models.user import User
from cineconnect.services.review_service import refresh_film_rating

logger = logging.getLogger(__name__)


class ContentKind:
    content_type: ContentType
    model: type[Base]

    def exists(self, db: Session, content_id: int) -> bool:
        return db.get(self.model, content_id) is not None

    def preview(self, db: Session, content_id: int) -> dict[str, Any] | None:
        raise NotImplementedError

    def delete(self, db: Session, content_id: int) -> bool:
        """Stage deletion of the row. Returns False when it is already gone."""
        row = db.get(self.model, content_id)
        if row is None:
            return False
        db.delete(row)
        return True


class ReviewContent(ContentKind):
    content_type = ContentType.review
    model = Review

    def preview(self, db, content_id):
        row = db.execute(
            select(Review, User.display_name, Film.title)
            .join(User, User.id == Review.user_id)
            .join(Film, Film.id == Review.film_id)
            .where(Review.id == content_id)
        ).first()
        if row is None:
            return None
        review, author, film_title = row
        return {
            "author_id": review.user_id,
            "author_name": author,
            "film_id": review.film_id,
            "film_title": film_title,
            "rating": review.rating,
            "text": review.comment,
        }

    def delete(self, db, content_id):
        review = db.get(Review, content_id)
        if review is None:
            return False
        film_id = review.film_id
        db.delete(review)
        refresh_film_rating(db, film_id)
        return True


class CommentReplyContent(ContentKind):
    content_type = ContentType.comment_reply
    model = CommentReply

    def preview(self, db, content_id):
        row = db.execute(
            select(CommentReply, User.display_name)
            .join(User, User.id == CommentReply.user_id)
            .where(CommentReply.id == content_id)
        ).first()
        if row is None:
            return None
        reply, author = row
        return {
            "author_id": reply.user_id,
            "author_name": author,
            "review_id": reply.parent_review_id,
            "text": reply.message,
        }


class GroupMessageContent(ContentKind):
    content_type = ContentType.group_message
    model = GroupMessage

    def preview(self, db, content_id):
        row = db.execute(
            select(GroupMessage, User.display_name, Group.title)
            .join(User, User.id == GroupMessage.user_id)
            .join(Group, Group.id == GroupMessage.group_id)
            .where(GroupMessage.id == content_id)
        ).first()
        if row is None:
            return None
        message, author, group_title = row
        return {
            "author_id": message.user_id,
            "author_name": author,
            "group_id": message.group_id,
            "group_title": group_title,
            "text": message.message,
        }


class UserContent(ContentKind):
    content_type = ContentType.user
    model = User

    def preview(self, db, content_id):
        user = db.get(User, content_id)
        if user is None:
            return None
        return {
            "author_id": user.id,
            "author_name": user.display_name,
            "bio": user.bio,
            "photo_url": user.photo_url,
        }

    def delete(self, db, content_id):
        raise BadRequestError("User accounts cannot be deleted through moderation")


CONTENT_KINDS: dict[ContentType, ContentKind] = {
    kind.content_type: kind
    for kind in (ReviewContent(), CommentReplyContent(), GroupMessageContent(), UserContent())
}


def content_kind(content_type: ContentType | str) -> ContentKind:
    try:
        return CONTENT_KINDS[ContentType(content_type)]
    except ValueError:
        raise BadRequestError(f"Unknown content type: {content_type}")
