# hackathon_service/crud/crud_admin.py
from typing import Optional

from sqlalchemy.orm import Session

from hackathon_service.crud.base import CRUDBase
from hackathon_service.models.admin import Admin
from hackathon_service.schemas.admin import AdminPromotion, AdminRoleChange


class CRUDAdmin(CRUDBase[Admin, AdminPromotion, AdminRoleChange]):
    def get_all(self, db: Session) -> list[Admin]:
        return db.query(self.model).order_by(self.model.created_at.desc()).all()

    def create_for_user(
        self,
        db: Session,
        *,
        user_id: str,
        email: str,
        role: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> Admin:
        db_obj = Admin(
            id=user_id,
            email=email,
            role=role,
            f_name=first_name,
            l_name=last_name,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


admin = CRUDAdmin(Admin)
