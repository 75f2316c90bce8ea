# hackathon_service/api/v1/endpoints/admin_workshops.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from hackathon_service.api import deps
from hackathon_service.core.limiter import limiter
from hackathon_service.models.admin import Admin
from hackathon_service.schemas.common import ApiResponse
from hackathon_service.schemas.workshop import (
    AdminWorkshop,
    AdminWorkshopDetail,
    WorkshopBulkDelete,
    WorkshopCreate,
    WorkshopDashboardStats,
    WorkshopUpdate,
)
from hackathon_service.services.workshop_service import WorkshopService

router = APIRouter(prefix="/admin/workshops", tags=["Admin Workshops"])


@router.get("", response_model=ApiResponse[list[AdminWorkshop]])
def list_all_workshops(
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """**[STAFF]** Every workshop, active or not, with registration counts."""
    return ApiResponse(data=service.list_admin_workshops(db))


@router.get("/stats", response_model=ApiResponse[WorkshopDashboardStats])
def workshop_stats(
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    return ApiResponse(data=service.get_dashboard_stats(db))


@router.post(
    "",
    response_model=ApiResponse[AdminWorkshop],
    status_code=status.HTTP_201_CREATED,
)
def create_workshop(
    workshop_in: WorkshopCreate,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """**[ADMIN]** Create a workshop."""
    workshop = service.create_workshop(db, obj_in=workshop_in)
    return ApiResponse(data=workshop, message="Workshop created successfully")


@router.post("/bulk-delete", response_model=ApiResponse[dict])
@limiter.limit("10/minute")
def bulk_delete_workshops(
    body: WorkshopBulkDelete,
    request: Request,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """**[ADMIN]** Delete several workshops and, with them, their registrations."""
    deleted = service.bulk_delete_workshops(db, workshop_ids=body.workshop_ids)
    return ApiResponse(
        data={"deletedCount": deleted},
        message=f"Successfully deleted {deleted} workshop(s)",
    )


@router.get("/{workshop_id}", response_model=ApiResponse[AdminWorkshopDetail])
def get_workshop(
    workshop_id: str,
    db: Session = Depends(deps.get_db),
    staff: Admin = Depends(deps.require_staff),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    return ApiResponse(data=service.get_workshop(db, workshop_id=workshop_id))


@router.patch("/{workshop_id}", response_model=ApiResponse[AdminWorkshop])
def update_workshop(
    workshop_id: str,
    workshop_in: WorkshopUpdate,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """**[ADMIN]** Partial update; omitted fields are left alone."""
    workshop = service.update_workshop(db, workshop_id=workshop_id, obj_in=workshop_in)
    return ApiResponse(data=workshop, message="Workshop updated successfully")


@router.delete("/{workshop_id}", response_model=ApiResponse[None])
def delete_workshop(
    workshop_id: str,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: WorkshopService = Depends(deps.get_workshop_service),
):
    """**[ADMIN]** Delete a workshop. Its registrations are deleted with it."""
    service.delete_workshop(db, workshop_id=workshop_id)
    return ApiResponse(message="Workshop deleted successfully")
