# hackathon_service/core/limiter.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from hackathon_service.core.config import settings

# Shared by every router so the app only has to register one limiter.
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
