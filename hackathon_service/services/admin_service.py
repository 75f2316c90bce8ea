# hackathon_service/services/admin_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.constants.statuses import AdminRole
from hackathon_service.core.exceptions import (
    AuthorizationDenied,
    DomainRuleViolation,
    NotFound,
    UpstreamFailure,
)
from hackathon_service.models.admin import Admin
from hackathon_service.schemas.admin import (
    AdminAccount,
    AdminPromotion,
    AdminRoleChange,
    AdminStatusView,
)

logger = logging.getLogger(__name__)


def admin_account(admin: Admin) -> AdminAccount:
    return AdminAccount(
        id=admin.id,
        email=admin.email,
        first_name=admin.f_name,
        last_name=admin.l_name,
        role=admin.role,
        status=admin.status,
        created_at=admin.created_at,
    )


class AdminService:
    """Admin role management. Callers are already known to be active admins."""

    def get_status(self, db: Session, *, user_id: str) -> AdminStatusView:
        try:
            admin = crud.admin.get(db, id=user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to check admin status for {user_id}: {str(e)}", exc_info=True)
            raise UpstreamFailure("check admin status") from e
        if not admin:
            return AdminStatusView(is_admin=False)
        return AdminStatusView(is_admin=True, role=admin.role, status=admin.status)

    def list_admins(self, db: Session) -> list[AdminAccount]:
        try:
            return [admin_account(a) for a in crud.admin.get_all(db)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list admins: {str(e)}", exc_info=True)
            raise UpstreamFailure("fetch admins") from e

    def promote_user(
        self, db: Session, *, actor: Admin, obj_in: AdminPromotion
    ) -> AdminAccount:
        if obj_in.role == AdminRole.SUPER_ADMIN and actor.role != AdminRole.SUPER_ADMIN:
            raise AuthorizationDenied("Only super admins can assign the super_admin role")
        try:
            user = crud.user.get_by_email(db, email=obj_in.email)
            if not user:
                raise NotFound("No registered user with that email")
            if crud.admin.get(db, id=user.id):
                raise DomainRuleViolation("User is already an admin")
            admin = crud.admin.create_for_user(
                db,
                user_id=user.id,
                email=user.email,
                role=obj_in.role,
                first_name=user.f_name,
                last_name=user.l_name,
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to promote {obj_in.email}: {str(e)}",
                exc_info=True,
                extra={"actor_id": actor.id},
            )
            raise UpstreamFailure("promote user") from e
        logger.info(f"Admin {actor.id} promoted {admin.id} to {admin.role}")
        return admin_account(admin)

    def change_role(
        self, db: Session, *, actor: Admin, admin_id: str, obj_in: AdminRoleChange
    ) -> AdminAccount:
        if obj_in.role == AdminRole.SUPER_ADMIN and actor.role != AdminRole.SUPER_ADMIN:
            raise AuthorizationDenied("Only super admins can assign the super_admin role")
        try:
            target = crud.admin.get(db, id=admin_id)
            if not target:
                raise NotFound("Admin not found")
            target = crud.admin.update(db, db_obj=target, obj_in={"role": obj_in.role})
        except SQLAlchemyError as e:
            logger.error(f"Failed to change role of {admin_id}: {str(e)}", exc_info=True)
            raise UpstreamFailure("update admin role") from e
        logger.info(f"Admin {actor.id} set role of {admin_id} to {obj_in.role}")
        return admin_account(target)

    def remove_admin(self, db: Session, *, actor: Admin, admin_id: str) -> None:
        if admin_id == actor.id:
            raise DomainRuleViolation("You cannot remove your own admin privileges")
        try:
            target = crud.admin.get(db, id=admin_id)
            if not target:
                raise NotFound("Admin not found")
            if target.role == AdminRole.SUPER_ADMIN and actor.role != AdminRole.SUPER_ADMIN:
                raise AuthorizationDenied("Only super admins can remove other super admins")
            crud.admin.remove(db, id=admin_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to remove admin {admin_id}: {str(e)}", exc_info=True)
            raise UpstreamFailure("remove admin") from e
        logger.info(f"Admin {actor.id} removed admin privileges from {admin_id}")
