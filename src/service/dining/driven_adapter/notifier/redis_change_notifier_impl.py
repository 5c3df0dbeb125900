"""
Redis Change Notifier

Publishes change events on `restaurant_{id}` channels and streams them back to
SSE subscribers. Publishing is fire-and-forget: failures are logged, never raised.
"""

from collections.abc import AsyncIterator
from typing import Any

import orjson

from src.platform.logging.loguru_io import Logger
from src.platform.state.redis_client import RedisClient
from src.service.dining.app.interface.i_change_notifier import IChangeNotifier


class RedisChangeNotifierImpl(IChangeNotifier):
    def __init__(self, *, redis_client: RedisClient) -> None:
        self._redis_client = redis_client

    async def publish(self, *, channel: str, event: dict[str, Any]) -> None:
        try:
            receivers = await self._redis_client.get_client().publish(channel, orjson.dumps(event))
            Logger.base.debug(f'📣 [NOTIFY] {channel} receivers={receivers} event={event}')
        except Exception as e:
            Logger.base.warning(f'⚠️ [NOTIFY] publish to {channel} failed: {type(e).__name__}: {e}')

    async def subscribe(self, *, channel: str) -> AsyncIterator[dict[str, Any]]:
        # Dedicated connection without read timeout
        pubsub_client = self._redis_client.create_pubsub_client()
        pubsub = pubsub_client.pubsub()

        try:
            await pubsub.subscribe(channel)
            Logger.base.info(f'📡 [NOTIFY] Subscribed to channel: {channel}')

            async for message in pubsub.listen():
                if message['type'] != 'message':
                    continue
                data = message['data']
                try:
                    yield orjson.loads(data if isinstance(data, bytes) else data.encode())
                except orjson.JSONDecodeError as e:
                    Logger.base.error(f'❌ [NOTIFY] Failed to decode message on {channel}: {e}')

        finally:
            await pubsub.unsubscribe(channel)
            await pubsub.aclose()
            await pubsub_client.aclose()
            Logger.base.info(f'📡 [NOTIFY] Unsubscribed from channel: {channel}')
