"""Moderation service: content reports and their resolution."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cineconnect.core.errors import DuplicateReportError, NotFoundError, ReportAlreadyResolvedError
from cineconnect.models.reported_content import ContentType, ModeratorAction, ReportedContent, ReportStatus
from cineconnect.models.user import User
from cineconnect.services.moderation_content import content_kind

logger = logging.getLogger(__name__)


def report_content(
    db: Session,
    reporter_id: int,
    content_type: ContentType,
    content_id: int,
    reason: str | None = None,
) -> ReportedContent:
    kind = content_kind(content_type)
    if not kind.exists(db, content_id):
        raise NotFoundError("Reported content not found")
    already = db.execute(
        select(ReportedContent.id).where(
            ReportedContent.content_type == kind.content_type.value,
            ReportedContent.content_id == content_id,
            ReportedContent.reporter_id == reporter_id,
        )
    ).first()
    if already:
        raise DuplicateReportError()

    report = ReportedContent(
        content_type=kind.content_type.value,
        content_id=content_id,
        reporter_id=reporter_id,
        reason=(reason or "").strip() or None,
        status=ReportStatus.pending.value,
    )
    db.add(report)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateReportError()
    db.refresh(report)
    logger.info("Report %s: %s %s by user=%s", report.id, report.content_type, content_id, reporter_id)
    return report


def list_reports(db: Session, status: ReportStatus | None = ReportStatus.pending) -> list[dict]:
    """Reports with a preview of the reported content.

    Content deleted since the report was filed yields a None preview.
    """
    stmt = (
        select(ReportedContent, User.display_name)
        .join(User, User.id == ReportedContent.reporter_id)
        .order_by(ReportedContent.created_at.desc(), ReportedContent.id.desc())
    )
    if status is not None:
        stmt = stmt.where(ReportedContent.status == status.value)

    reports = []
    for report, reporter_name in db.execute(stmt).all():
        reports.append(
            {
                "id": report.id,
                "content_type": report.content_type,
                "content_id": report.content_id,
                "reporter_id": report.reporter_id,
                "reporter_name": reporter_name,
                "reason": report.reason,
                "status": report.status,
                "moderator_id": report.moderator_id,
                "moderator_action": report.moderator_action,
                "moderator_notes": report.moderator_notes,
                "created_at": report.created_at,
                "content": content_kind(report.content_type).preview(db, report.content_id),
            }
        )
    return reports


def resolve_report(
    db: Session,
    moderator_id: int,
    report_id: int,
    action: ModeratorAction,
    notes: str | None = None,
) -> ReportedContent:
    """Apply a moderator decision to a pending report, exactly once."""
    report = db.get(ReportedContent, report_id)
    if not report:
        raise NotFoundError("Report not found")
    if report.status != ReportStatus.pending.value:
        raise ReportAlreadyResolvedError()

    try:
        if action == ModeratorAction.delete:
            deleted = content_kind(report.content_type).delete(db, report.content_id)
            if not deleted:
                logger.info("Report %s: content already gone", report_id)
        report.status = ReportStatus.resolved.value
        report.moderator_id = moderator_id
        report.moderator_action = action.value
        report.moderator_notes = notes
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(report)
    logger.info("Report %s resolved by user=%s with action=%s", report_id, moderator_id, action.value)
    return report
