from typing import Optional

from redis.asyncio import ConnectionPool as AsyncConnectionPool, Redis as AsyncRedis

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger


class RedisClient:
    """
    Async Redis client with an explicit pool lifecycle.

    Usage:
        await redis_client.initialize()  # In startup
        client = redis_client.get_client()  # In adapters
        await redis_client.disconnect()  # In shutdown
    """

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._client: Optional[AsyncRedis] = None

    async def initialize(self) -> AsyncRedis:
        """Create the connection pool and ping once (idempotent, fail-fast)"""
        if self._client is not None:
            return self._client

        s = self._settings
        pool = AsyncConnectionPool.from_url(
            s.REDIS_URL,
            password=s.REDIS_PASSWORD or None,
            decode_responses=s.REDIS_DECODE_RESPONSES,
            max_connections=s.REDIS_POOL_MAX_CONNECTIONS,
            socket_timeout=s.REDIS_POOL_SOCKET_TIMEOUT,
            socket_connect_timeout=s.REDIS_POOL_SOCKET_CONNECT_TIMEOUT,
            health_check_interval=s.REDIS_POOL_HEALTH_CHECK_INTERVAL,
        )
        client = AsyncRedis.from_pool(pool)
        await client.ping()
        self._client = client
        Logger.base.info(f'📡 [REDIS] Connected to {s.REDIS_HOST}:{s.REDIS_PORT}/{s.REDIS_DB}')
        return client

    def get_client(self) -> AsyncRedis:
        if self._client is None:
            raise RuntimeError(
                'Redis client not initialized. Call await redis_client.initialize() during startup.'
            )
        return self._client

    def create_pubsub_client(self) -> AsyncRedis:
        """Dedicated connection without read timeout, for long-lived SUBSCRIBE loops."""
        s = self._settings
        return AsyncRedis.from_url(
            s.REDIS_URL,
            password=s.REDIS_PASSWORD or None,
            decode_responses=s.REDIS_DECODE_RESPONSES,
            socket_timeout=None,
            socket_connect_timeout=s.REDIS_POOL_SOCKET_CONNECT_TIMEOUT,
        )

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            Logger.base.info('📡 [REDIS] Disconnected')
