# hackathon_service/api/v1/endpoints/admins.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hackathon_service.api import deps
from hackathon_service.models.admin import Admin
from hackathon_service.schemas.admin import (
    AdminAccount,
    AdminPromotion,
    AdminRoleChange,
    AdminStatusView,
)
from hackathon_service.schemas.common import ApiResponse
from hackathon_service.schemas.token import TokenPayload
from hackathon_service.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["Admins"])


@router.get("/status", response_model=ApiResponse[AdminStatusView])
def get_admin_status(
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: AdminService = Depends(deps.get_admin_service),
):
    """Whether the signed-in user is an admin, and with which role."""
    return ApiResponse(data=service.get_status(db, user_id=current_user.sub))


@router.get("/admins", response_model=ApiResponse[list[AdminAccount]])
def list_admins(
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: AdminService = Depends(deps.get_admin_service),
):
    return ApiResponse(data=service.list_admins(db))


@router.post(
    "/admins",
    response_model=ApiResponse[AdminAccount],
    status_code=status.HTTP_201_CREATED,
)
def promote_user(
    body: AdminPromotion,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: AdminService = Depends(deps.get_admin_service),
):
    """
    **[ADMIN]** Grant admin access to a registered user by email.
    Only super admins can grant `super_admin`.
    """
    account = service.promote_user(db, actor=admin, obj_in=body)
    return ApiResponse(data=account, message="User promoted successfully")


@router.patch("/admins/{admin_id}/role", response_model=ApiResponse[AdminAccount])
def change_admin_role(
    admin_id: str,
    body: AdminRoleChange,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: AdminService = Depends(deps.get_admin_service),
):
    account = service.change_role(db, actor=admin, admin_id=admin_id, obj_in=body)
    return ApiResponse(data=account, message="Admin role updated successfully")


@router.delete("/admins/{admin_id}", response_model=ApiResponse[None])
def remove_admin(
    admin_id: str,
    db: Session = Depends(deps.get_db),
    admin: Admin = Depends(deps.require_admin),
    service: AdminService = Depends(deps.get_admin_service),
):
    """**[ADMIN]** Revoke admin access. Admins cannot revoke their own."""
    service.remove_admin(db, actor=admin, admin_id=admin_id)
    return ApiResponse(message="Admin privileges removed successfully")
