"""
Post-commit side effects of reservation mutations

- Dashboard cache invalidation runs in-line, before the request returns
- Change events and guest messages go through the side-effect queue
"""

from datetime import date
from functools import partial
from typing import Optional

from src.platform.event.i_side_effect_queue import ISideEffectQueue
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_change_notifier import (
    IChangeNotifier,
    restaurant_channel,
)
from src.service.dining.app.interface.i_dashboard_cache import IDashboardCache
from src.service.dining.app.interface.i_guest_notifier import IGuestNotifier
from src.service.dining.app.service.guest_message_builder import GuestMessage
from src.service.dining.domain.enum.change_event_type import ChangeEventType


class ReservationSideEffects:
    def __init__(
        self,
        *,
        dashboard_cache: IDashboardCache,
        change_notifier: IChangeNotifier,
        guest_notifier: IGuestNotifier,
        side_effect_queue: ISideEffectQueue,
    ) -> None:
        self.dashboard_cache = dashboard_cache
        self.change_notifier = change_notifier
        self.guest_notifier = guest_notifier
        self.side_effect_queue = side_effect_queue

    async def reservation_changed(
        self,
        *,
        restaurant_id: int,
        on: date,
        slot_id: int,
        guest_message: Optional[GuestMessage] = None,
    ) -> None:
        await self.dashboard_cache.invalidate(restaurant_id=restaurant_id, on=on)
        self.publish_change(
            restaurant_id=restaurant_id,
            event_type=ChangeEventType.RESERVATION_UPDATE,
            on=on,
            slot_id=slot_id,
        )
        if guest_message is not None:
            self.send_guest_message(guest_message)

    def publish_change(
        self,
        *,
        restaurant_id: int,
        event_type: ChangeEventType,
        on: Optional[date] = None,
        slot_id: Optional[int] = None,
    ) -> None:
        event = {
            'event_type': str(event_type),
            'restaurant_id': restaurant_id,
            'date': on.isoformat() if on else None,
            'slot_id': slot_id,
        }
        self.side_effect_queue.enqueue(
            name='publish_change',
            job=partial(
                self.change_notifier.publish,
                channel=restaurant_channel(restaurant_id),
                event=event,
            ),
        )

    def send_guest_message(self, message: GuestMessage) -> None:
        Logger.base.info(f'📨 [SIDE_EFFECT] Queued guest message template={message.template_id}')
        self.side_effect_queue.enqueue(
            name='guest_notification',
            job=partial(
                self.guest_notifier.send_guest_confirmation,
                contact=message.contact,
                template_id=message.template_id,
                params=message.params,
            ),
        )
