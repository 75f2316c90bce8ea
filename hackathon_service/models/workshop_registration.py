# hackathon_service/models/workshop_registration.py
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hackathon_service.db.base_class import Base


class WorkshopRegistration(Base):
    __tablename__ = "workshop_registrations"

    id = Column(
        String, primary_key=True, default=lambda: f"wreg_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    workshop_id = Column(
        String,
        ForeignKey("workshops.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    registered_at = Column(DateTime(timezone=True), server_default=func.now())

    # Snapshot of the participant at registration time, read by the CSV export
    f_name = Column(String(255))
    l_name = Column(String(255))
    year_of_study = Column(String(50))
    gender = Column(Integer)
    major = Column(Integer)

    workshop = relationship("Workshop", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("user_id", "workshop_id", name="unique_user_workshop"),
    )
