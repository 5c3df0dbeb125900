from datetime import date
from typing import Optional

import attrs


@attrs.define
class SlotAvailabilityOverride:
    """Manual per-date switch layered on a slot. A missing row means every flag is False."""

    slot_id: int
    date: date
    is_slot_disabled: bool = False
    is_indoor_disabled: bool = False
    is_outdoor_disabled: bool = False
    id: Optional[int] = None

    @classmethod
    def default_for(cls, *, slot_id: int, on: date) -> 'SlotAvailabilityOverride':
        return cls(slot_id=slot_id, date=on)
