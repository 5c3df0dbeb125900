"""
Guest message builder

Turns a committed booking into the template id and positional parameters the
messaging gateway expects:

    [customer_name, "Sat, 14 Jun 2025", "7:30 PM - 9:00 PM", "4", "T1+T2"]
"""

from datetime import date
from typing import Optional

import attrs

from src.platform.config.core_setting import Settings
from src.service.dining.domain.entity.slot_entity import Slot
from src.service.dining.domain.enum.notification_type import NotificationType
from src.service.dining.domain.value_object.custom_time_window import CustomTimeWindow
from src.service.dining.domain.value_object.party_details import PartyDetails
from src.service.dining.domain.value_object.wall_clock import format_12h


@attrs.frozen
class GuestMessage:
    contact: str
    template_id: str
    params: list[str]


def template_id_for(notification_type: NotificationType, *, settings: Settings) -> str:
    return {
        NotificationType.RESERVATION_CONFIRMATION: settings.WHATSAPP_TEMPLATE_RESERVATION_CONFIRMATION,
        NotificationType.WEEKDAY_BRUNCH: settings.WHATSAPP_TEMPLATE_WEEKDAY_BRUNCH,
        NotificationType.WEEKEND_BRUNCH: settings.WHATSAPP_TEMPLATE_WEEKEND_BRUNCH,
        NotificationType.RESERVATION_UPDATE: settings.WHATSAPP_TEMPLATE_RESERVATION_UPDATE,
        NotificationType.RESERVATION_MOVED: settings.WHATSAPP_TEMPLATE_RESERVATION_MOVED,
    }[notification_type]


def build_guest_message(
    *,
    notification_type: NotificationType,
    party: PartyDetails,
    slot: Slot,
    on: date,
    table_numbers: list[str],
    custom_start_time: Optional[str],
    settings: Settings,
) -> GuestMessage:
    if custom_start_time:
        window = CustomTimeWindow.within_slot(slot=slot, start_time=custom_start_time)
        time_label = f'{format_12h(window.start_time)} - {format_12h(window.end_time)}'
    else:
        time_label = slot.display_time

    return GuestMessage(
        contact=party.contact,
        template_id=template_id_for(notification_type, settings=settings),
        params=[
            party.customer_name,
            on.strftime('%a, %d %b %Y'),
            time_label,
            str(party.party_size),
            '+'.join(table_numbers),
        ],
    )
