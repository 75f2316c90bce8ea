# hackathon_service/schemas/admin.py
import datetime as dt
from typing import Literal, Optional

from hackathon_service.schemas.common import CamelModel

AdminRoleValue = Literal["admin", "super_admin", "volunteer"]


class AdminAccount(CamelModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    status: str
    created_at: Optional[dt.datetime] = None


class AdminPromotion(CamelModel):
    email: str
    role: AdminRoleValue = "volunteer"


class AdminRoleChange(CamelModel):
    role: AdminRoleValue


class AdminStatusView(CamelModel):
    is_admin: bool
    role: Optional[str] = None
    status: Optional[str] = None
