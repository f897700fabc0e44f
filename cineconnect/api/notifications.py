"""Notification endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cineconnect.core.deps import get_current_user
from cineconnect.db.session import get_db
from cineconnect.models.user import User
from cineconnect.schemas.auth import MessageResponse
from cineconnect.schemas.notification import NotificationOut
from cineconnect.services.notification_service import list_notifications, mark_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
def notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_notifications(db, current_user.id)


@router.put("/{notification_id}/read", response_model=MessageResponse)
def read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    mark_read(db, current_user.id, notification_id)
    return MessageResponse(message="Notification marked as read")
