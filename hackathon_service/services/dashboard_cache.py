# hackathon_service/services/dashboard_cache.py
import json
import logging
from typing import Any, Optional

from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "dashboard:admin"
PARTICIPANT_PREFIX = "dashboard:participant"


class DashboardCache:
    """
    Short-lived Redis cache for dashboard views.

    A cache miss or a Redis outage only costs a database read, so every
    failure here is logged and swallowed.
    """

    def __init__(self, redis_client: Redis, ttl_seconds: int = 60):
        self.redis = redis_client
        self.ttl = ttl_seconds

    @staticmethod
    def admin_key(name: str) -> str:
        return f"{ADMIN_PREFIX}:{name}"

    @staticmethod
    def participant_key(user_id: str) -> str:
        return f"{PARTICIPANT_PREFIX}:{user_id}"

    def get(self, key: str) -> Optional[Any]:
        try:
            data = self.redis.get(key)
            return json.loads(data) if data else None
        except (RedisError, ValueError) as e:
            logger.warning(f"Dashboard cache read failed for {key}: {str(e)}")
            return None

    def set(self, key: str, value: Any) -> None:
        try:
            self.redis.setex(key, self.ttl, json.dumps(value, default=str))
        except (RedisError, TypeError) as e:
            logger.warning(f"Dashboard cache write failed for {key}: {str(e)}")

    def invalidate_admin(self) -> None:
        try:
            keys = list(self.redis.scan_iter(match=f"{ADMIN_PREFIX}:*"))
            if keys:
                self.redis.delete(*keys)
        except RedisError as e:
            logger.warning(f"Failed to invalidate admin dashboard cache: {str(e)}")

    def invalidate_participant(self, user_id: str) -> None:
        try:
            self.redis.delete(self.participant_key(user_id))
        except RedisError as e:
            logger.warning(
                f"Failed to invalidate dashboard cache for user {user_id}: {str(e)}"
            )

    def invalidate_dashboards(self, user_id: Optional[str] = None) -> None:
        """Drops the admin views and, when given, one participant's view."""
        self.invalidate_admin()
        if user_id:
            self.invalidate_participant(user_id)
