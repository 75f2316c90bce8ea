# hackathon_service/services/registration_service.py
"""
Participant registration, profile edits and registration form options.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.core.config import settings
from hackathon_service.core.exceptions import NotFound, UpstreamFailure, ValidationFailed
from hackathon_service.crud.crud_lookup import CRUDLookup
from hackathon_service.crud.crud_user import PROFILE_COLUMNS
from hackathon_service.models.user import User
from hackathon_service.schemas.registration import (
    FormOptions,
    ParticipantProfile,
    ParticipantRegistration,
    ProfileUpdate,
    RegistrationStatus,
)
from hackathon_service.services.dashboard_cache import DashboardCache
from hackathon_service.services.identity_provider import IdentityProviderClient

logger = logging.getLogger(__name__)

ALREADY_REGISTERED_MESSAGE = "User already registered"
VERIFICATION_SENT_MESSAGE = "Verification email sent successfully"

# Form option key -> lookup table, in the order they are read
FORM_LOOKUPS: list[tuple[str, CRUDLookup]] = [
    ("gender", crud.lookup.gender),
    ("universities", crud.lookup.university),
    ("majors", crud.lookup.major),
    ("interests", crud.lookup.interest),
    ("dietary_restrictions", crud.lookup.dietary_restriction),
    ("marketing_types", crud.lookup.marketing_type),
]

# Single-id form fields -> (lookup table, message when the id is unknown)
ID_FIELDS: dict[str, tuple[CRUDLookup, str]] = {
    "gender": (crud.lookup.gender, "Please select your gender"),
    "university": (crud.lookup.university, "Please select your university"),
    "major": (crud.lookup.major, "Please select your major"),
    "experience": (crud.lookup.experience_type, "Please select your experience level"),
    "marketing": (crud.lookup.marketing_type, "Please tell us how you heard about us"),
}


def _read_lookup(session_factory: Callable[[], Session], lookup: CRUDLookup) -> list[dict]:
    with session_factory() as db:
        return lookup.get_options(db)


class RegistrationService:
    def __init__(
        self,
        cache: DashboardCache,
        identity_provider: IdentityProviderClient,
        batch_size: Optional[int] = None,
    ):
        self.cache = cache
        self.identity_provider = identity_provider
        self.batch_size = max(batch_size or settings.FORM_OPTIONS_BATCH_SIZE, 1)

    def _check_lookup_ids(
        self,
        db: Session,
        *,
        ids: dict[str, int],
        interests: Optional[list[int]] = None,
        dietary_restrictions: Optional[list[int]] = None,
    ) -> None:
        """Rejects ids that do not exist in their lookup tables."""
        field_errors: dict[str, list[str]] = {}
        for field, value in ids.items():
            lookup, message = ID_FIELDS[field]
            if lookup.missing_ids(db, ids=[value]):
                field_errors[field] = [message]
        if interests and crud.lookup.interest.missing_ids(db, ids=interests):
            field_errors["interests"] = ["Please select valid interests"]
        if dietary_restrictions and crud.lookup.dietary_restriction.missing_ids(
            db, ids=dietary_restrictions
        ):
            field_errors["dietaryRestrictions"] = ["Please select valid dietary restrictions"]
        if field_errors:
            raise ValidationFailed(field_errors)

    def register(
        self, db: Session, *, user_id: str, obj_in: ParticipantRegistration
    ) -> tuple[ParticipantProfile, bool]:
        """
        Creates the participant. An existing participant is returned as-is.

        Returns:
            (profile, created)
        """
        try:
            existing = crud.user.get(db, id=user_id)
            if existing:
                logger.info(f"User {user_id} already registered, returning existing record")
                return self._build_profile(db, user_id), False

            self._check_lookup_ids(
                db,
                ids={field: getattr(obj_in, field) for field in ID_FIELDS},
                interests=obj_in.interests,
                dietary_restrictions=obj_in.dietary_restrictions,
            )
            crud.user.create_with_associations(db, obj_in=obj_in, user_id=user_id)
            profile = self._build_profile(db, user_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to register user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise UpstreamFailure("complete registration") from e

        logger.info(f"User {user_id} registered")
        self.cache.invalidate_admin()
        return profile, True

    def get_registration_status(self, db: Session, *, user_id: str) -> RegistrationStatus:
        try:
            user = crud.user.get(db, id=user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to check registration for {user_id}: {str(e)}", exc_info=True)
            raise UpstreamFailure("check registration status") from e
        if not user:
            return RegistrationStatus(is_registered=False)
        return RegistrationStatus(is_registered=True, status=user.status)

    def get_profile(self, db: Session, *, user_id: str) -> ParticipantProfile:
        key = self.cache.participant_key(user_id)
        cached = self.cache.get(key)
        if cached is not None:
            return ParticipantProfile.model_validate(cached)
        try:
            profile = self._build_profile(db, user_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to load profile for user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise UpstreamFailure("load your profile") from e
        self.cache.set(key, profile.model_dump(mode="json"))
        return profile

    def update_profile(
        self,
        db: Session,
        *,
        user_id: str,
        obj_in: ProfileUpdate,
        verify_email: bool = False,
    ) -> tuple[ParticipantProfile, Optional[str]]:
        """
        Applies only the fields present in the request.

        With ``verify_email`` a new address goes to the identity provider
        for verification and is parked in ``pending_email`` instead of being
        written to the profile.

        Returns:
            (profile, message) where message is set when a verification email went out
        """
        sent = obj_in.model_fields_set
        changes = {
            field: getattr(obj_in, field)
            for field in sent
            if field in PROFILE_COLUMNS and getattr(obj_in, field) is not None
        }
        if "resume" in changes and changes["resume"] == "":
            changes["resume"] = None
        interests = obj_in.interests if "interests" in sent else None
        dietary = obj_in.dietary_restrictions if "dietary_restrictions" in sent else None

        message = None
        try:
            user = crud.user.get(db, id=user_id)
            if not user:
                raise NotFound("Participant not found")

            self._check_lookup_ids(
                db,
                ids={f: v for f, v in changes.items() if f in ID_FIELDS},
                interests=interests,
                dietary_restrictions=dietary,
            )

            new_email = changes.get("email")
            if new_email is not None and (new_email == user.email or verify_email):
                changes.pop("email")
            if verify_email and new_email and new_email != user.email:
                # Raises before anything is written if the provider refuses
                self.identity_provider.request_email_change(user_id, new_email)
            else:
                new_email = None

            crud.user.update_profile(
                db,
                db_obj=user,
                changes=changes,
                interests=interests,
                dietary_restrictions=dietary,
            )
            if new_email:
                crud.user.set_pending_email(db, db_obj=user, email=new_email)
                message = VERIFICATION_SENT_MESSAGE
            profile = self._build_profile(db, user_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to update profile for user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise UpstreamFailure("update your profile") from e

        self.cache.invalidate_dashboards(user_id)
        return profile, message

    def _build_profile(self, db: Session, user_id: str) -> ParticipantProfile:
        row = crud.user.get_with_labels(db, user_id=user_id)
        if row is None:
            raise NotFound("Participant not found")
        user, gender, university, major, experience, marketing = row
        return profile_from_user(
            user,
            interests=crud.user.get_interest_ids(db, user_id=user_id),
            dietary_restrictions=crud.user.get_dietary_ids(db, user_id=user_id),
            labels={
                "gender_label": gender,
                "university_label": university,
                "major_label": major,
                "experience_label": experience,
                "marketing_label": marketing,
            },
        )

    def get_form_options(self, session_factory: Callable[[], Session]) -> FormOptions:
        """
        Reads the six lookup tables ``batch_size`` at a time, each read on its
        own session. A failed read fails the whole call after its batch.
        """
        options: dict[str, list[dict]] = {}
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for start in range(0, len(FORM_LOOKUPS), self.batch_size):
                batch = FORM_LOOKUPS[start : start + self.batch_size]
                futures = [
                    (name, pool.submit(_read_lookup, session_factory, lookup))
                    for name, lookup in batch
                ]
                failed = []
                for name, future in futures:
                    try:
                        options[name] = future.result()
                    except SQLAlchemyError as e:
                        logger.error(
                            f"Failed to load {name} options: {str(e)}",
                            exc_info=True,
                        )
                        failed.append(name)
                if failed:
                    raise UpstreamFailure(f"load form options ({', '.join(failed)})")
        return FormOptions.model_validate(options)


def profile_from_user(
    user: User,
    *,
    interests: list[int],
    dietary_restrictions: list[int],
    labels: Optional[dict] = None,
) -> ParticipantProfile:
    return ParticipantProfile(
        id=user.id,
        first_name=user.f_name,
        last_name=user.l_name,
        email=user.email,
        gender=user.gender,
        university=user.university,
        major=user.major,
        experience=user.experience,
        marketing=user.marketing,
        year_of_study=user.year_of_study,
        previous_attendance=bool(user.prev_attendance),
        parking=user.parking,
        accommodations=user.accommodations or "",
        resume=user.resume_url,
        status=user.status,
        checked_in=bool(user.checked_in),
        timestamp=user.timestamp,
        pending_email=user.pending_email,
        email_change_requested_at=user.email_change_requested_at,
        interests=interests,
        dietary_restrictions=dietary_restrictions,
        **(labels or {}),
    )
