"""Moderation schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from cineconnect.models.reported_content import ContentType, ModeratorAction


class ReportRequest(BaseModel):
    content_type: ContentType
    content_id: int
    reason: str | None = None


class ReportResponse(BaseModel):
    id: int
    content_type: str
    content_id: int
    reporter_id: int
    reason: str | None = None
    status: str
    moderator_id: int | None = None
    moderator_action: str | None = None
    moderator_notes: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReportWithContent(ReportResponse):
    reporter_name: str = ""
    # None when the reported content no longer exists
    content: dict[str, Any] | None = None


class ResolveRequest(BaseModel):
    action: ModeratorAction
    notes: str | None = None
