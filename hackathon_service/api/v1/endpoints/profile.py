# hackathon_service/api/v1/endpoints/profile.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from hackathon_service.api import deps
from hackathon_service.core.limiter import limiter
from hackathon_service.schemas.common import ApiResponse
from hackathon_service.schemas.registration import ParticipantProfile, ProfileUpdate
from hackathon_service.schemas.token import TokenPayload
from hackathon_service.services.registration_service import RegistrationService

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ApiResponse[ParticipantProfile])
def get_profile(
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: RegistrationService = Depends(deps.get_registration_service),
):
    return ApiResponse(data=service.get_profile(db, user_id=current_user.sub))


@router.patch("", response_model=ApiResponse[ParticipantProfile])
@limiter.limit("10/minute")
def update_profile(
    profile_in: ProfileUpdate,
    request: Request,
    verify_email: bool = Query(
        False,
        alias="verifyEmail",
        description="Send a verification email instead of changing the address directly",
    ),
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: RegistrationService = Depends(deps.get_registration_service),
):
    """
    Sparse profile update. Only the fields present in the body change.
    Sending `interests` or `dietaryRestrictions` replaces the whole set;
    leaving them out keeps the current one.
    """
    profile, message = service.update_profile(
        db, user_id=current_user.sub, obj_in=profile_in, verify_email=verify_email
    )
    return ApiResponse(data=profile, message=message or "Profile updated successfully")
