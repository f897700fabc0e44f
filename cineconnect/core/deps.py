"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cineconnect.core.errors import AuthenticationError, ForbiddenError
from cineconnect.core.security import decode_access_token
from cineconnect.db.session import get_db
from cineconnect.models.user import User, UserRole
from cineconnect.services.auth_service import get_user_by_email

security = HTTPBearer(auto_error=False)


def user_from_token(db: Session, token: str) -> User | None:
    """Resolve a bearer token to its user, or None."""
    payload = decode_access_token(token)
    if not payload or "sub" not in payload:
        return None
    # sub is email for our tokens
    return get_user_by_email(db, payload["sub"])


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Require authenticated user. Raises 401 if not authenticated."""
    if not credentials:
        raise AuthenticationError("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        raise AuthenticationError("Invalid or expired token")
    user = get_user_by_email(db, payload["sub"])
    if not user:
        raise AuthenticationError("User not found")
    return user


def get_optional_user(
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User | None:
    """Current user when a valid token is sent, else None."""
    if not credentials:
        return None
    return user_from_token(db, credentials.credentials)


def require_admin(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require the site-wide admin role (moderation back office)."""
    if current_user.role != UserRole.admin.value:
        raise ForbiddenError("Only administrators can access moderation")
    return current_user
