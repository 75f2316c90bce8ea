# hackathon_service/crud/crud_user.py
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from hackathon_service.constants.statuses import ParticipantStatus
from hackathon_service.crud.base import CRUDBase
from hackathon_service.models.lookups import (
    ExperienceType,
    Gender,
    Major,
    MarketingType,
    University,
)
from hackathon_service.models.user import User, UserDietRestriction, UserInterest
from hackathon_service.schemas.registration import ParticipantRegistration, ProfileUpdate

logger = logging.getLogger(__name__)

# Form field name -> users column
PROFILE_COLUMNS = {
    "first_name": "f_name",
    "last_name": "l_name",
    "email": "email",
    "gender": "gender",
    "university": "university",
    "major": "major",
    "experience": "experience",
    "marketing": "marketing",
    "year_of_study": "year_of_study",
    "previous_attendance": "prev_attendance",
    "parking": "parking",
    "accommodations": "accommodations",
    "resume": "resume_url",
}


class CRUDUser(CRUDBase[User, ParticipantRegistration, ProfileUpdate]):
    def create_with_associations(
        self, db: Session, *, obj_in: ParticipantRegistration, user_id: str
    ) -> User:
        """
        Inserts the user row plus interest and dietary join rows as one unit.
        New registrations start as pending and not checked in.
        """
        try:
            db_obj = User(
                id=user_id,
                f_name=obj_in.first_name,
                l_name=obj_in.last_name,
                email=obj_in.email,
                gender=obj_in.gender,
                university=obj_in.university,
                major=obj_in.major,
                experience=obj_in.experience,
                marketing=obj_in.marketing,
                year_of_study=obj_in.year_of_study,
                prev_attendance=obj_in.previous_attendance,
                parking=obj_in.parking,
                accommodations=obj_in.accommodations,
                resume_url=obj_in.resume or None,
                status=ParticipantStatus.PENDING,
                checked_in=False,
                timestamp=datetime.now(timezone.utc),
            )
            db.add(db_obj)
            db.flush()
            db.add_all(
                UserInterest(id=user_id, interest=interest_id)
                for interest_id in dict.fromkeys(obj_in.interests)
            )
            db.add_all(
                UserDietRestriction(id=user_id, restriction=restriction_id)
                for restriction_id in dict.fromkeys(obj_in.dietary_restrictions)
            )
            db.commit()
            db.refresh(db_obj)
            return db_obj
        except Exception as e:
            logger.error(
                f"Failed to create user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            db.rollback()
            raise

    def get_interest_ids(self, db: Session, *, user_id: str) -> list[int]:
        rows = (
            db.query(UserInterest.interest)
            .filter(UserInterest.id == user_id)
            .order_by(UserInterest.interest)
            .all()
        )
        return [row[0] for row in rows]

    def get_dietary_ids(self, db: Session, *, user_id: str) -> list[int]:
        rows = (
            db.query(UserDietRestriction.restriction)
            .filter(UserDietRestriction.id == user_id)
            .order_by(UserDietRestriction.restriction)
            .all()
        )
        return [row[0] for row in rows]

    def update_profile(
        self,
        db: Session,
        *,
        db_obj: User,
        changes: dict[str, Any],
        interests: Optional[list[int]] = None,
        dietary_restrictions: Optional[list[int]] = None,
    ) -> User:
        """
        Applies column changes and, when given, replaces the interest and
        dietary associations (delete all, then insert) in one commit.
        A None list means "leave untouched"; an empty list clears.
        """
        try:
            for field, value in changes.items():
                setattr(db_obj, PROFILE_COLUMNS[field], value)
            db_obj.updated_at = datetime.now(timezone.utc)

            if interests is not None:
                db.query(UserInterest).filter(UserInterest.id == db_obj.id).delete(
                    synchronize_session="fetch"
                )
                db.add_all(
                    UserInterest(id=db_obj.id, interest=interest_id)
                    for interest_id in dict.fromkeys(interests)
                )
            if dietary_restrictions is not None:
                db.query(UserDietRestriction).filter(
                    UserDietRestriction.id == db_obj.id
                ).delete(synchronize_session="fetch")
                db.add_all(
                    UserDietRestriction(id=db_obj.id, restriction=restriction_id)
                    for restriction_id in dict.fromkeys(dietary_restrictions)
                )

            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
            return db_obj
        except Exception as e:
            logger.error(
                f"Failed to update profile for user {db_obj.id}: {str(e)}",
                exc_info=True,
                extra={"user_id": db_obj.id, "fields": sorted(changes)},
            )
            db.rollback()
            raise

    def set_pending_email(self, db: Session, *, db_obj: User, email: str) -> User:
        db_obj.pending_email = email
        db_obj.email_change_requested_at = datetime.now(timezone.utc)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def _labelled_query(self, db: Session):
        return (
            db.query(
                User,
                Gender.gender,
                University.uni,
                Major.major,
                ExperienceType.experience,
                MarketingType.marketing,
            )
            .outerjoin(Gender, Gender.id == User.gender)
            .outerjoin(University, University.id == User.university)
            .outerjoin(Major, Major.id == User.major)
            .outerjoin(ExperienceType, ExperienceType.id == User.experience)
            .outerjoin(MarketingType, MarketingType.id == User.marketing)
        )

    def get_with_labels(self, db: Session, *, user_id: str) -> Optional[tuple]:
        """(user, gender, university, major, experience, marketing) or None."""
        return self._labelled_query(db).filter(User.id == user_id).first()

    def get_multi_with_labels(
        self,
        db: Session,
        *,
        filters: Optional[dict[str, Any]] = None,
        since: Optional[datetime] = None,
    ) -> list[tuple]:
        """
        Participants newest first with lookup labels.

        ``filters`` maps a lookup name (gender, university, major, experience,
        marketing) to a label to match exactly.
        """
        query = self._labelled_query(db)
        label_columns = {
            "gender": Gender.gender,
            "university": University.uni,
            "major": Major.major,
            "experience": ExperienceType.experience,
            "marketing": MarketingType.marketing,
        }
        for name, label in (filters or {}).items():
            if label:
                query = query.filter(label_columns[name] == label)
        if since is not None:
            query = query.filter(User.timestamp >= since)
        return query.order_by(User.timestamp.desc()).all()

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def get_many(self, db: Session, *, user_ids: list[str]) -> list[User]:
        return db.query(User).filter(User.id.in_(user_ids)).all()

    def bulk_update(
        self, db: Session, *, user_ids: list[str], values: dict[str, Any]
    ) -> int:
        """Applies the same column values to every listed user in one statement."""
        try:
            values = {**values, "updated_at": datetime.now(timezone.utc)}
            updated = (
                db.query(User)
                .filter(User.id.in_(user_ids))
                .update(values, synchronize_session=False)
            )
            db.commit()
            return updated
        except Exception as e:
            logger.error(
                f"Failed to bulk update participants: {str(e)}",
                exc_info=True,
                extra={"participant_ids": user_ids},
            )
            db.rollback()
            raise

    def remove_many(self, db: Session, *, user_ids: list[str]) -> int:
        try:
            deleted = (
                db.query(User)
                .filter(User.id.in_(user_ids))
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted
        except Exception as e:
            logger.error(
                f"Failed to delete participants: {str(e)}",
                exc_info=True,
                extra={"participant_ids": user_ids},
            )
            db.rollback()
            raise


user = CRUDUser(User)
