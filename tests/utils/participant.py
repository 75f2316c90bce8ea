from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from hackathon_service.constants.statuses import AdminRole, AdminStatus, ParticipantStatus
from hackathon_service.models.admin import Admin
from hackathon_service.models.rsvp import PreRegistration
from hackathon_service.models.user import User, UserInterest


def create_random_participant(
    db: Session,
    user_id: str = "user_test",
    *,
    status: str = ParticipantStatus.PENDING,
    email: Optional[str] = None,
    registered_days_ago: float = 1,
    gender: int = 1,
    major: int = 1,
    interests: tuple[int, ...] = (1,),
    **columns,
) -> User:
    """
    Inserts a participant directly. Lookup ids refer to the seeded tables
    (1 is "Male", "MRU", "BCIS", "Beginner", "Poster").
    """
    user = User(
        id=user_id,
        f_name=columns.pop("f_name", "Test"),
        l_name=columns.pop("l_name", "User"),
        email=email or f"{user_id}@example.com",
        gender=gender,
        university=columns.pop("university", 1),
        major=major,
        experience=columns.pop("experience", 1),
        marketing=columns.pop("marketing", 1),
        year_of_study=columns.pop("year_of_study", "2nd"),
        prev_attendance=columns.pop("prev_attendance", False),
        parking=columns.pop("parking", "No"),
        accommodations="",
        status=status,
        checked_in=columns.pop("checked_in", False),
        timestamp=datetime.now(timezone.utc) - timedelta(days=registered_days_ago),
        **columns,
    )
    db.add(user)
    db.flush()
    db.add_all(UserInterest(id=user_id, interest=i) for i in interests)
    db.commit()
    db.refresh(user)
    return user


def create_admin(
    db: Session,
    user_id: str = "admin_test",
    *,
    role: str = AdminRole.ADMIN,
    status: str = AdminStatus.ACTIVE,
) -> Admin:
    admin = Admin(
        id=user_id,
        email=f"{user_id}@example.com",
        f_name="Staff",
        l_name="Member",
        role=role,
        status=status,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def pre_register(db: Session, email: str) -> PreRegistration:
    entry = PreRegistration(email=email)
    db.add(entry)
    db.commit()
    return entry
