"""
Redis client factory.

One asyncio client (and its connection pool) is created per process in the
application lifespan and stored on ``app.state.redis``. Every gate and health
probe borrows that client; nothing else opens connections.
"""

from redis.asyncio import Redis

from app.core.config import settings


def create_redis_client() -> Redis:
    return Redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
    )
