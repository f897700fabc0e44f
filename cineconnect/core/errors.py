"""Domain errors and their HTTP mapping."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cineconnect.core.config import settings

logger = logging.getLogger(__name__)


class CineConnectError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 400
    detail: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class ValidationError(CineConnectError):
    status_code = 400
    detail = "Invalid data"


class BadRequestError(ValidationError):
    detail = "Bad request"


class SelfReferenceError(ValidationError):
    detail = "Cannot target yourself"


class AuthenticationError(CineConnectError):
    status_code = 401
    detail = "Not authenticated"


class ForbiddenError(CineConnectError):
    status_code = 403
    detail = "Access denied"


class PrivateGroupError(ForbiddenError):
    detail = "This group is private"


class NotFoundError(CineConnectError):
    status_code = 404
    detail = "Not found"


class NotMemberError(NotFoundError):
    detail = "You are not a member of this group"


class ConflictError(CineConnectError):
    status_code = 409
    detail = "Conflict"


class AlreadyFriendsError(ConflictError):
    detail = "You are already friends with this user"


class DuplicateRequestError(ConflictError):
    detail = "A friend request is already pending"


class AlreadyFollowingError(ConflictError):
    detail = "You already follow this user"


class AlreadyMemberError(ConflictError):
    detail = "Already a member of this group"


class DuplicateReportError(ConflictError):
    detail = "You have already reported this content"


class ReportAlreadyResolvedError(ConflictError):
    detail = "This report has already been handled"


def install_error_handlers(app: FastAPI) -> None:
    """Map domain errors to JSON responses."""

    @app.exception_handler(CineConnectError)
    async def domain_error_handler(request: Request, exc: CineConnectError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"detail": "Internal server error"}
        if settings.is_development:
            content["error"] = repr(exc)
        return JSONResponse(status_code=500, content=content)
