# hackathon_service/models/user.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.sql import func

from hackathon_service.constants.statuses import ParticipantStatus, Parking, YearOfStudy
from hackathon_service.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    # The id comes from the external auth provider, never generated here.
    id = Column(String, primary_key=True)
    f_name = Column(String(255))
    l_name = Column(String(255))
    email = Column(String(255), nullable=False, index=True)

    gender = Column(Integer, ForeignKey("gender.id"))
    university = Column(Integer, ForeignKey("universities.id"))
    major = Column(Integer, ForeignKey("majors.id"))
    experience = Column(Integer, ForeignKey("experience_types.id"))
    marketing = Column(Integer, ForeignKey("marketing_types.id"))

    prev_attendance = Column(Boolean, nullable=False, server_default=text("false"))
    parking = Column(Enum(*Parking.all_values(), name="parking_state"))
    year_of_study = Column(Enum(*YearOfStudy.all_values(), name="year_of_study"))
    accommodations = Column(Text, nullable=False, server_default="")
    resume_url = Column(String(500))
    resume_filename = Column(String(255))

    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    status = Column(
        Enum(*ParticipantStatus.all_values(), name="status"),
        nullable=False,
        server_default=ParticipantStatus.WAITLISTED,
        index=True,
    )
    checked_in = Column(Boolean, nullable=False, server_default=text("false"))

    # Email changes wait here until the identity provider confirms them
    pending_email = Column(String(255))
    email_change_requested_at = Column(DateTime(timezone=True))
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class UserInterest(Base):
    __tablename__ = "user_interests"

    id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    interest = Column(Integer, ForeignKey("interests.id"), primary_key=True)


class UserDietRestriction(Base):
    __tablename__ = "user_diet_restrictions"

    id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    restriction = Column(
        Integer, ForeignKey("dietary_restrictions.id"), primary_key=True
    )
