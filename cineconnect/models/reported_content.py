"""Content report model for moderation."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from cineconnect.db.base import Base


class ContentType(str, enum.Enum):
    review = "review"
    comment_reply = "comment_reply"
    group_message = "group_message"
    user = "user"


class ReportStatus(str, enum.Enum):
    pending = "pending"
    reviewed = "reviewed"
    resolved = "resolved"
    dismissed = "dismissed"


class ModeratorAction(str, enum.Enum):
    delete = "delete"
    warn = "warn"
    ban = "ban"
    no_action = "no_action"


class ReportedContent(Base):
    __tablename__ = "reported_content"
    __table_args__ = (
        UniqueConstraint("content_type", "content_id", "reporter_id", name="uq_report_per_reporter"),
        Index("ix_reported_content_type_id", "content_type", "content_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    content_type: Mapped[str] = mapped_column(String(30), nullable=False)
    content_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reporter_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), index=True, nullable=False, default=ReportStatus.pending.value)
    moderator_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    moderator_action: Mapped[str | None] = mapped_column(String(20), nullable=True)
    moderator_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
