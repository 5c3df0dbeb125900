"""
Redis Dashboard Cache

Key layout: {DEPLOY_ENV}:dashboard:summary:{version}:{restaurant_id}:{YYYY-MM-DD}
Values are orjson-encoded DashboardSummary dicts with a TTL.

Store failures never reach callers: a failed read is a miss, a failed write or
invalidation is logged and counted. Staleness is bounded by the TTL.
"""

from datetime import date
from typing import Optional

import orjson

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.platform.state.redis_client import RedisClient
from src.service.dining.app.interface.i_dashboard_cache import IDashboardCache
from src.service.dining.domain.dashboard_summary import DashboardSummary


# Bump when the cached summary shape changes so old entries are never decoded
DASHBOARD_CACHE_VERSION = 'v2'
SCAN_BATCH_SIZE = 200


class DashboardCacheImpl(IDashboardCache):
    def __init__(self, *, redis_client: RedisClient, settings: Settings) -> None:
        self._redis_client = redis_client
        self._ttl_seconds = settings.DASHBOARD_CACHE_TTL_SECONDS
        self._prefix = f'{settings.DEPLOY_ENV}:dashboard:summary:{DASHBOARD_CACHE_VERSION}'

    def _key(self, *, restaurant_id: int, on: date) -> str:
        return f'{self._prefix}:{restaurant_id}:{on.isoformat()}'

    async def get(self, *, restaurant_id: int, on: date) -> Optional[DashboardSummary]:
        key = self._key(restaurant_id=restaurant_id, on=on)
        try:
            raw = await self._redis_client.get_client().get(key)
            summary = DashboardSummary.from_dict(orjson.loads(raw)) if raw else None
        except Exception as e:
            metrics.record_cache_error(operation='get')
            Logger.base.warning(f'⚠️ [CACHE] get {key} failed: {type(e).__name__}: {e}')
            return None

        metrics.record_cache_lookup(hit=summary is not None)
        return summary

    async def set(self, *, restaurant_id: int, on: date, summary: DashboardSummary) -> None:
        key = self._key(restaurant_id=restaurant_id, on=on)
        try:
            await self._redis_client.get_client().set(
                key, orjson.dumps(summary.to_dict()), ex=self._ttl_seconds
            )
        except Exception as e:
            metrics.record_cache_error(operation='set')
            Logger.base.warning(f'⚠️ [CACHE] set {key} failed: {type(e).__name__}: {e}')

    async def invalidate(self, *, restaurant_id: int, on: date) -> None:
        key = self._key(restaurant_id=restaurant_id, on=on)
        try:
            await self._redis_client.get_client().delete(key)
            Logger.base.debug(f'🧹 [CACHE] Invalidated {key}')
        except Exception as e:
            metrics.record_cache_error(operation='invalidate')
            Logger.base.warning(f'⚠️ [CACHE] invalidate {key} failed: {type(e).__name__}: {e}')

    async def invalidate_restaurant(self, *, restaurant_id: int) -> None:
        pattern = f'{self._prefix}:{restaurant_id}:*'
        try:
            client = self._redis_client.get_client()
            keys = [key async for key in client.scan_iter(match=pattern, count=SCAN_BATCH_SIZE)]
            if keys:
                await client.delete(*keys)
            Logger.base.debug(f'🧹 [CACHE] Invalidated {len(keys)} days for restaurant={restaurant_id}')
        except Exception as e:
            metrics.record_cache_error(operation='invalidate')
            Logger.base.warning(
                f'⚠️ [CACHE] invalidate restaurant={restaurant_id} failed: {type(e).__name__}: {e}'
            )
