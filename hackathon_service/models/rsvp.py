# hackathon_service/models/rsvp.py
"""
Tables backing RSVP admission.

``pre_reg`` lists emails that signed up before registration opened; they go
first in the direct-eligibility ordering. ``confirmed_count`` is a single row
that confirm/decline lock to serialize admission, and which also holds the
count last published to live subscribers.
"""

from sqlalchemy import Column, DateTime, Integer, String, text
from sqlalchemy.sql import func

from hackathon_service.db.base_class import Base


class PreRegistration(Base):
    __tablename__ = "pre_reg"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    time = Column(DateTime(timezone=True), server_default=func.now())


class ConfirmedCount(Base):
    __tablename__ = "confirmed_count"

    id = Column(Integer, primary_key=True)
    count = Column(Integer, nullable=False, server_default=text("0"))
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
