# hackathon_service/api/v1/endpoints/registration.py
from typing import Callable

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from hackathon_service.api import deps
from hackathon_service.core.limiter import limiter
from hackathon_service.schemas.common import ApiResponse
from hackathon_service.schemas.registration import (
    FormOptions,
    ParticipantProfile,
    ParticipantRegistration,
    RegistrationStatus,
)
from hackathon_service.schemas.token import TokenPayload
from hackathon_service.services.registration_service import (
    ALREADY_REGISTERED_MESSAGE,
    RegistrationService,
)

router = APIRouter(prefix="/registration", tags=["Registration"])


@router.get("/options", response_model=ApiResponse[FormOptions])
def get_form_options(
    session_factory: Callable[[], Session] = Depends(deps.get_session_factory),
    service: RegistrationService = Depends(deps.get_registration_service),
):
    """
    Choices for the registration form's dropdowns. Public, so the form can
    render before sign-in completes.
    """
    return ApiResponse(data=service.get_form_options(session_factory))


@router.get("", response_model=ApiResponse[RegistrationStatus])
def get_registration_status(
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: RegistrationService = Depends(deps.get_registration_service),
):
    return ApiResponse(data=service.get_registration_status(db, user_id=current_user.sub))


@router.post(
    "",
    response_model=ApiResponse[ParticipantProfile],
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("5/minute")
def register_participant(
    registration_in: ParticipantRegistration,
    request: Request,
    response: Response,
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: RegistrationService = Depends(deps.get_registration_service),
):
    """
    Submit the registration form for the signed-in user.

    Submitting again after a successful registration returns the stored
    profile with a 200 instead of creating a second record.

    **Errors**:
    - 422: Field validation failed (see `fieldErrors`)
    """
    profile, created = service.register(
        db, user_id=current_user.sub, obj_in=registration_in
    )
    if not created:
        response.status_code = status.HTTP_200_OK
        return ApiResponse(data=profile, message=ALREADY_REGISTERED_MESSAGE)
    return ApiResponse(data=profile, message="Registration successful")
