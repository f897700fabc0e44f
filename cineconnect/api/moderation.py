"""Moderation endpoints: reporting content and the admin review queue."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cineconnect.core.deps import get_current_user, require_admin
from cineconnect.db.session import get_db
from cineconnect.models.reported_content import ReportStatus
from cineconnect.models.user import User
from cineconnect.schemas.moderation import ReportRequest, ReportResponse, ReportWithContent, ResolveRequest
from cineconnect.services.moderation_service import list_reports, report_content, resolve_report

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.post("/report", response_model=ReportResponse)
def report(
    data: ReportRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Any authenticated user reports a review, reply, chat message or user."""
    return report_content(db, current_user.id, data.content_type, data.content_id, data.reason)


@router.get("/reports", response_model=list[ReportWithContent])
def reports(
    status: ReportStatus | None = ReportStatus.pending,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Admin queue of reports with a preview of the reported content."""
    return list_reports(db, status)


@router.post("/reports/{report_id}/action", response_model=ReportResponse)
def act_on_report(
    report_id: int,
    data: ResolveRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Resolve a pending report, deleting the content when action is delete."""
    return resolve_report(db, admin.id, report_id, data.action, data.notes)
