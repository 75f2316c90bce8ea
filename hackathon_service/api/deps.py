# hackathon_service/api/deps.py
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from redis import Redis
from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.constants.statuses import AdminRole, AdminStatus
from hackathon_service.core.config import settings
from hackathon_service.core.exceptions import AuthenticationRequired, AuthorizationDenied
from hackathon_service.db.redis import redis_client
from hackathon_service.db.session import SessionLocal, get_db
from hackathon_service.models.admin import Admin
from hackathon_service.schemas.token import TokenPayload
from hackathon_service.services.admin_service import AdminService
from hackathon_service.services.analytics_service import AnalyticsService
from hackathon_service.services.dashboard_cache import DashboardCache
from hackathon_service.services.identity_provider import IdentityProviderClient
from hackathon_service.services.live_values import (
    LivePublisher,
    LiveValueHub,
    RedisChannelFactory,
)
from hackathon_service.services.participant_admin_service import ParticipantAdminService
from hackathon_service.services.registration_service import RegistrationService
from hackathon_service.services.rsvp_service import RsvpService
from hackathon_service.services.workshop_service import WorkshopService

__all__ = ["get_db"]

# The token is issued by the external auth provider; tokenUrl only feeds the docs.
# auto_error is off so a missing token maps to our own AuthenticationRequired.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def get_session_factory() -> Callable[[], Session]:
    """For work that needs its own sessions, such as parallel lookup reads."""
    return SessionLocal


def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> TokenPayload:
    if not token:
        raise AuthenticationRequired()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
        return TokenPayload(**payload)
    except (JWTError, ValueError):
        # Catches any error from jose or pydantic validation
        raise AuthenticationRequired()


def get_current_admin_record(
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(get_current_user),
) -> Optional[Admin]:
    return crud.admin.get(db, id=current_user.sub)


def require_staff(admin: Optional[Admin] = Depends(get_current_admin_record)) -> Admin:
    """Any active admin, super admin or volunteer. Used for reads and exports."""
    if not admin or admin.status != AdminStatus.ACTIVE:
        raise AuthorizationDenied()
    return admin


def require_admin(admin: Admin = Depends(require_staff)) -> Admin:
    """Active admin or super admin; volunteers are read-only."""
    if admin.role == AdminRole.VOLUNTEER:
        raise AuthorizationDenied()
    return admin


def get_redis() -> Redis:
    return redis_client


def get_dashboard_cache(redis: Redis = Depends(get_redis)) -> DashboardCache:
    return DashboardCache(redis, ttl_seconds=settings.DASHBOARD_CACHE_TTL_SECONDS)


def get_live_publisher(redis: Redis = Depends(get_redis)) -> LivePublisher:
    return LivePublisher(redis)


@lru_cache
def get_live_hub() -> LiveValueHub:
    return LiveValueHub(RedisChannelFactory(redis_client))


def get_identity_provider() -> IdentityProviderClient:
    return IdentityProviderClient()


def get_workshop_service(
    cache: DashboardCache = Depends(get_dashboard_cache),
) -> WorkshopService:
    return WorkshopService(cache)


def get_rsvp_service(
    publisher: LivePublisher = Depends(get_live_publisher),
    cache: DashboardCache = Depends(get_dashboard_cache),
) -> RsvpService:
    return RsvpService(publisher, cache=cache)


def get_registration_service(
    cache: DashboardCache = Depends(get_dashboard_cache),
    identity_provider: IdentityProviderClient = Depends(get_identity_provider),
) -> RegistrationService:
    return RegistrationService(cache, identity_provider)


def get_analytics_service(
    cache: DashboardCache = Depends(get_dashboard_cache),
) -> AnalyticsService:
    return AnalyticsService(cache)


def get_participant_admin_service(
    cache: DashboardCache = Depends(get_dashboard_cache),
    publisher: LivePublisher = Depends(get_live_publisher),
) -> ParticipantAdminService:
    return ParticipantAdminService(cache, publisher)


def get_admin_service() -> AdminService:
    return AdminService()
