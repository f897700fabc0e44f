"""Auth endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cineconnect.core.config import settings
from cineconnect.core.deps import get_current_user
from cineconnect.core.errors import AuthenticationError
from cineconnect.core.security import create_access_token
from cineconnect.db.session import get_db
from cineconnect.models.user import User
from cineconnect.schemas.auth import (
    LoginRequest,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetRequestResponse,
    RegisterRequest,
    TokenResponse,
    UserMe,
)
from cineconnect.services.auth_service import authenticate_user, create_user, request_password_reset, reset_password

router = APIRouter(prefix="/auth", tags=["auth"])

RESET_REQUESTED = "If an account exists for this email, a reset link has been sent"


@router.post("/register", response_model=UserMe)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Register a new member account."""
    return create_user(db, data)


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """Login and return access token."""
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise AuthenticationError("Invalid email or password")
    token = create_access_token(subject=user.email, extra={"role": user.role})
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserMe)
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return current_user


@router.post("/password-reset-request", response_model=PasswordResetRequestResponse)
def password_reset_request(
    data: PasswordResetRequest,
    db: Session = Depends(get_db),
):
    """Start a password reset. The answer is the same whether or not the email is known."""
    raw_token = request_password_reset(db, data.email)
    response = PasswordResetRequestResponse(message=RESET_REQUESTED)
    if settings.is_development and raw_token:
        response.reset_token = raw_token
    return response


@router.post("/password-reset", response_model=MessageResponse)
def password_reset(
    data: PasswordResetConfirm,
    db: Session = Depends(get_db),
):
    reset_password(db, data.token, data.new_password)
    return MessageResponse(message="Password updated")
