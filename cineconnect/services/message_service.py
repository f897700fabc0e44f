"""Group chat message persistence."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from cineconnect.core.errors import BadRequestError
from cineconnect.models.group_message import GroupMessage
from cineconnect.models.user import User
from cineconnect.schemas.message import GroupMessageOut
from cineconnect.schemas.user import UserSummary
from cineconnect.services.group_service import require_viewable

logger = logging.getLogger(__name__)


def to_payload(message: GroupMessage, author: User) -> GroupMessageOut:
    """Message with its denormalized author, as sent to clients."""
    return GroupMessageOut(
        id=message.id,
        group_id=message.group_id,
        user_id=message.user_id,
        message=message.message,
        created_at=message.created_at,
        author=UserSummary.model_validate(author),
    )


def list_messages(db: Session, group_id: int, viewer_id: int | None) -> list[GroupMessageOut]:
    """Full history of a group, oldest first."""
    require_viewable(db, group_id, viewer_id)
    rows = db.execute(
        select(GroupMessage, User)
        .join(User, User.id == GroupMessage.user_id)
        .where(GroupMessage.group_id == group_id)
        .order_by(GroupMessage.created_at, GroupMessage.id)
    ).all()
    return [to_payload(message, author) for message, author in rows]


def post_message(db: Session, group_id: int, author: User, text: str) -> GroupMessageOut:
    """Persist a message. Private groups accept messages from members only."""
    require_viewable(db, group_id, author.id)
    body = (text or "").strip()
    if not body:
        raise BadRequestError("Message cannot be empty")
    message = GroupMessage(group_id=group_id, user_id=author.id, message=body)
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Message %s posted in group %s by user=%s", message.id, group_id, author.id)
    return to_payload(message, author)
