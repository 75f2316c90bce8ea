# hackathon_service/db/redis.py
import redis

from hackathon_service.core.config import settings


def get_redis_client():
    """
    Creates and returns a new Redis client instance.
    Connections are lazy, so building the client never touches the network.
    """
    return redis.from_url(settings.REDIS_URL, decode_responses=True)


# Shared instance used by the dashboard cache and the live-value channels.
redis_client = get_redis_client()
