# hackathon_service/models/workshop.py
import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text, Time, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hackathon_service.db.base_class import Base


class Workshop(Base):
    __tablename__ = "workshops"

    id = Column(
        String, primary_key=True, default=lambda: f"wks_{uuid.uuid4().hex[:12]}"
    )
    title = Column(String(255), nullable=False)
    description = Column(Text)
    event_name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    location = Column(String(255))
    # 0 means unlimited
    max_capacity = Column(Integer, nullable=False, server_default=text("0"))
    is_active = Column(Boolean, nullable=False, server_default=text("true"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    registrations = relationship(
        "WorkshopRegistration",
        back_populates="workshop",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
