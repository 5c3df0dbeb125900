"""
Stream Reservation Updates Use Case

SSE stream of change events for one restaurant, so dashboards refresh
without polling.
"""

from collections.abc import AsyncGenerator
from typing import Any, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_change_notifier import (
    IChangeNotifier,
    restaurant_channel,
)


CONNECTED_EVENT = 'connected'


class StreamReservationUpdatesUseCase:
    def __init__(self, *, change_notifier: IChangeNotifier) -> None:
        self.change_notifier = change_notifier

    @classmethod
    @inject
    def depends(
        cls,
        change_notifier: IChangeNotifier = Depends(Provide[Container.change_notifier]),
    ) -> Self:
        return cls(change_notifier=change_notifier)

    async def stream(self, *, restaurant_id: int) -> AsyncGenerator[dict[str, Any], None]:
        """
        Yields:
            A `connected` event first, then every event published on the restaurant channel
        """
        channel = restaurant_channel(restaurant_id)
        try:
            yield {'event_type': CONNECTED_EVENT, 'restaurant_id': restaurant_id}
            async for event in self.change_notifier.subscribe(channel=channel):
                yield event

        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'[SSE] Client disconnected from {channel}')
            raise
        except Exception as e:
            Logger.base.error(f'[SSE] Error in stream for {channel}: {type(e).__name__}: {e}')
            raise
