# hackathon_service/api/v1/endpoints/workshops.py
from io import BytesIO
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from hackathon_service.api import deps
from hackathon_service.core.config import settings
from hackathon_service.core.limiter import limiter
from hackathon_service.models.admin import Admin
from hackathon_service.schemas.common import ApiResponse
from hackathon_service.schemas.token import TokenPayload
from hackathon_service.schemas.workshop import (
    RegistrationOutcome,
    WorkshopRegistrant,
    WorkshopWithStatus,
)
from hackathon_service.services.export import (
    workshop_export_filename,
    workshop_registrations_csv,
)
from hackathon_service.services.workshop_service import WorkshopService

router = APIRouter(prefix="/workshops", tags=["Workshops"])


@router.get("", response_model=ApiResponse[list[WorkshopWithStatus]])
def list_workshops(
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """
    Active workshops with their registration count, whether they are full
    and whether the caller is registered.
    """
    return ApiResponse(data=service.list_workshops(db, user_id=current_user.sub))


@router.post("/{workshop_id}/register", response_model=ApiResponse[RegistrationOutcome])
@limiter.limit("20/minute")
def register_for_workshop(
    workshop_id: str,
    request: Request,
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """
    Take a seat in a workshop.

    **Errors**:
    - 404: Workshop not found
    - 409: Already registered, workshop full or workshop not active
    """
    outcome = service.register(db, user_id=current_user.sub, workshop_id=workshop_id)
    return ApiResponse(data=outcome, message="Successfully registered for workshop")


@router.delete("/{workshop_id}/register", response_model=ApiResponse[RegistrationOutcome])
@limiter.limit("20/minute")
def unregister_from_workshop(
    workshop_id: str,
    request: Request,
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    outcome = service.unregister(db, user_id=current_user.sub, workshop_id=workshop_id)
    return ApiResponse(data=outcome, message="Successfully unregistered from workshop")


@router.get("/registrations", response_model=ApiResponse[list[WorkshopRegistrant]])
def list_workshop_registrations(
    workshop: Optional[str] = Query(None, description="Limit to one workshop id"),
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """**[STAFF]** Registrations for one workshop, or all of them."""
    return ApiResponse(data=service.list_registrations(db, workshop_id=workshop))


@router.get("/registrations/export")
def export_workshop_registrations(
    workshop: Optional[str] = Query(None, description="Limit to one workshop id"),
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """**[STAFF]** CSV of registrations. An empty selection still returns the header row."""
    title = service.get_workshop_title(db, workshop_id=workshop) if workshop else None
    registrants = service.list_registrations(db, workshop_id=workshop)
    output = BytesIO(workshop_registrations_csv(registrants).encode("utf-8"))
    filename = workshop_export_filename(title, settings.EVENT_NAME)
    return StreamingResponse(
        output,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
