# hackathon_service/models/admin.py
from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.sql import func

from hackathon_service.constants.statuses import AdminRole, AdminStatus
from hackathon_service.db.base_class import Base


class Admin(Base):
    __tablename__ = "admins"

    # Same id as the auth provider user
    id = Column(String, primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    f_name = Column(String(255))
    l_name = Column(String(255))
    role = Column(
        Enum(*AdminRole.all_values(), name="admin_role"),
        nullable=False,
        server_default=AdminRole.VOLUNTEER,
    )
    status = Column(
        Enum(*AdminStatus.all_values(), name="admin_status"),
        nullable=False,
        server_default=AdminStatus.ACTIVE,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
