"""Auth service."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cineconnect.core.config import settings
from cineconnect.core.errors import BadRequestError, ConflictError, NotFoundError
from cineconnect.core.security import hash_password, hash_reset_token, new_reset_token, verify_password
from cineconnect.models.user import User, UserRole
from cineconnect.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by email."""
    return db.execute(select(User).where(User.email == email.lower())).scalar_one_or_none()


def get_user_by_display_name(db: Session, display_name: str) -> User | None:
    return db.execute(
        select(User).where(func.lower(User.display_name) == display_name.lower())
    ).scalar_one_or_none()


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, data: RegisterRequest) -> User:
    """Create a new member account."""
    if get_user_by_email(db, data.email):
        raise ConflictError("Email already registered")
    if get_user_by_display_name(db, data.display_name):
        raise ConflictError("Display name already taken")
    user = User(
        email=data.email.lower(),
        hashed_password=hash_password(data.password),
        display_name=data.display_name,
        role=UserRole.member.value,
        genre_preferences=[],
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email or display name already registered")
    db.refresh(user)
    logger.info("User registered: id=%s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate user by email and password."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def request_password_reset(db: Session, email: str) -> str | None:
    """Store a reset token for the account, if any. Returns the raw token."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    raw, digest = new_reset_token()
    user.reset_password_token = digest
    user.reset_password_expires = datetime.now(timezone.utc) + timedelta(
        minutes=settings.password_reset_expire_minutes
    )
    db.commit()
    logger.info("Password reset requested for user=%s", user.id)
    return raw


def reset_password(db: Session, token: str, new_password: str) -> User:
    digest = hash_reset_token(token)
    user = db.execute(select(User).where(User.reset_password_token == digest)).scalar_one_or_none()
    if not user or not user.reset_password_expires:
        raise BadRequestError("Invalid or expired reset token")
    expires = user.reset_password_expires
    if expires.tzinfo is None:
        # SQLite hands back naive datetimes
        expires = expires.replace(tzinfo=timezone.utc)
    if expires < datetime.now(timezone.utc):
        raise BadRequestError("Invalid or expired reset token")
    user.hashed_password = hash_password(new_password)
    user.reset_password_token = None
    user.reset_password_expires = None
    db.commit()
    logger.info("Password reset completed for user=%s", user.id)
    return user
