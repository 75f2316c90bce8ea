# hackathon_service/api/v1/endpoints/admin_participants.py
from io import BytesIO
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from hackathon_service.api import deps
from hackathon_service.core.config import settings
from hackathon_service.core.limiter import limiter
from hackathon_service.models.admin import Admin
from hackathon_service.schemas.analytics import (
    ParticipantStats,
    RegistrationTrends,
    TrendFilters,
)
from hackathon_service.schemas.common import ApiResponse
from hackathon_service.schemas.participant import (
    ParticipantAdminUpdate,
    ParticipantBulkDelete,
    ParticipantBulkUpdate,
    ParticipantBulkUpdateResult,
    ParticipantSummary,
)
from hackathon_service.services.analytics_service import AnalyticsService
from hackathon_service.services.export import participants_csv
from hackathon_service.services.participant_admin_service import ParticipantAdminService

router = APIRouter(prefix="/admin/participants", tags=["Admin Participants"])


@router.get("", response_model=ApiResponse[list[ParticipantSummary]])
def list_participants(
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: AnalyticsService = Depends(deps.get_analytics_service),
):
    """**[STAFF]** All participants, newest registration first."""
    return ApiResponse(data=service.list_participants(db))


@router.get("/stats", response_model=ApiResponse[ParticipantStats])
def get_participant_stats(
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: AnalyticsService = Depends(deps.get_analytics_service),
):
    """
    **[STAFF]** Totals, status counts, per-dimension distributions and the
    last 30 days of registrations. Returns zeroed stats when nobody has
    registered yet.
    """
    return ApiResponse(data=service.get_participant_stats(db))


@router.get("/stats/export")
def export_participants(
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: AnalyticsService = Depends(deps.get_analytics_service),
):
    """**[STAFF]** Every participant as CSV."""
    output = BytesIO(participants_csv(service.list_participants(db)).encode("utf-8"))
    filename = f"participants-{settings.EVENT_NAME}.csv"
    return StreamingResponse(
        output,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/trends", response_model=ApiResponse[RegistrationTrends])
def get_registration_trends(
    marketing: Optional[str] = Query(None),
    experience: Optional[str] = Query(None),
    major: Optional[str] = Query(None),
    gender: Optional[str] = Query(None),
    university: Optional[str] = Query(None),
    days: int = Query(settings.ANALYTICS_DEFAULT_DAYS, ge=1, le=365),
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: AnalyticsService = Depends(deps.get_analytics_service),
):
    """
    **[STAFF]** Daily registrations over the last `days` days. Each filter
    is a label (e.g. `gender=Female`); unknown labels are ignored.
    """
    filters = TrendFilters(
        marketing=marketing,
        experience=experience,
        major=major,
        gender=gender,
        university=university,
        days=days,
    )
    return ApiResponse(data=service.get_registration_trends(db, filters=filters))


@router.patch("/bulk-update", response_model=ApiResponse[ParticipantBulkUpdateResult])
@limiter.limit("10/minute")
def bulk_update_participants(
    body: ParticipantBulkUpdate,
    request: Request,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: ParticipantAdminService = Depends(deps.get_participant_admin_service),
):
    """**[ADMIN]** Set status and/or check-in for many participants at once."""
    result = service.bulk_update(db, obj_in=body)
    return ApiResponse(
        data=result,
        message=f"Successfully updated {result.updated_count} participant(s)",
    )


@router.post("/bulk-delete", response_model=ApiResponse[dict])
@limiter.limit("10/minute")
def bulk_delete_participants(
    body: ParticipantBulkDelete,
    request: Request,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: ParticipantAdminService = Depends(deps.get_participant_admin_service),
):
    deleted = service.bulk_delete(db, participant_ids=body.participant_ids)
    return ApiResponse(
        data={"deletedCount": deleted},
        message=f"Successfully deleted {deleted} participant(s)",
    )


@router.get("/{participant_id}", response_model=ApiResponse[ParticipantSummary])
def get_participant(
    participant_id: str,
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: ParticipantAdminService = Depends(deps.get_participant_admin_service),
):
    return ApiResponse(data=service.get_participant(db, participant_id=participant_id))


@router.patch("/{participant_id}", response_model=ApiResponse[ParticipantSummary])
def update_participant(
    participant_id: str,
    body: ParticipantAdminUpdate,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: ParticipantAdminService = Depends(deps.get_participant_admin_service),
):
    """**[ADMIN]** Change one participant's status or check-in flag."""
    participant = service.update_participant(
        db, participant_id=participant_id, obj_in=body
    )
    return ApiResponse(data=participant, message="Participant updated successfully")
