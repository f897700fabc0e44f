"""Notification service."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from cineconnect.core.errors import NotFoundError
from cineconnect.models.notification import Notification, NotificationType

LIST_LIMIT = 50


def add_notification(
    db: Session,
    user_id: int,
    kind: NotificationType,
    title: str,
    message: str | None = None,
    link: str | None = None,
) -> Notification:
    """Stage a notification in the caller's transaction."""
    notification = Notification(
        user_id=user_id,
        type=kind.value,
        title=title,
        message=message,
        link=link,
        is_read=False,
    )
    db.add(notification)
    return notification


def list_notifications(db: Session, user_id: int, limit: int = LIST_LIMIT) -> list[Notification]:
    return list(
        db.scalars(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
    )


def mark_read(db: Session, user_id: int, notification_id: int) -> None:
    result = db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(is_read=True)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Notification not found")
    db.commit()
