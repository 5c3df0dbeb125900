"""
Custom start time inside a slot

Operators may seat a party at a 15-minute step inside the slot instead of the
slot start. The seating lasts a fixed 90 minutes. The window is informational
only; occupancy is still keyed on (table, slot, date).
"""

from typing import TYPE_CHECKING

import attrs

from src.platform.exception.exceptions import ValidationError
from src.service.dining.domain.value_object.wall_clock import (
    format_wall_clock,
    is_within_window,
    parse_wall_clock,
)


if TYPE_CHECKING:
    from src.service.dining.domain.entity.slot_entity import Slot


CUSTOM_TIME_STEP_MINUTES = 15
CUSTOM_TIME_DURATION_MINUTES = 90


@attrs.frozen
class CustomTimeWindow:
    start_time: str
    end_time: str

    @classmethod
    def within_slot(cls, *, slot: 'Slot', start_time: str) -> 'CustomTimeWindow':
        minutes = parse_wall_clock(start_time, field='custom_start_time')
        if minutes % CUSTOM_TIME_STEP_MINUTES:
            raise ValidationError(
                f'custom_start_time must be on a {CUSTOM_TIME_STEP_MINUTES}-minute boundary'
            )
        slot_start = parse_wall_clock(slot.start_time)
        slot_end = parse_wall_clock(slot.end_time)
        if not is_within_window(minutes, start=slot_start, end=slot_end):
            raise ValidationError(
                f'custom_start_time must fall within the slot {slot.start_time}-{slot.end_time}'
            )
        return cls(
            start_time=format_wall_clock(minutes),
            end_time=format_wall_clock(minutes + CUSTOM_TIME_DURATION_MINUTES),
        )
