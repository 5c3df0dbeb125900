"""
Occupancy Calculator rules

Pure functions over already-loaded rows, so the same rules serve the staff
table grid, the public slot list and the slot list badge counts.
"""

from datetime import date
from typing import Iterable, Optional

import attrs

from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.entity.slot_availability_override_entity import (
    SlotAvailabilityOverride,
)


@attrs.frozen
class SlotOccupancy:
    slot_id: int
    date: date
    total_tables: int
    occupied_table_ids: frozenset[int]
    reserved_count: int
    is_slot_disabled: bool = False
    is_indoor_disabled: bool = False
    is_outdoor_disabled: bool = False

    @property
    def occupied_count(self) -> int:
        return len(self.occupied_table_ids)

    @property
    def is_auto_disabled(self) -> bool:
        """Every table of the restaurant is taken for this slot/date."""
        return self.total_tables > 0 and self.occupied_count >= self.total_tables

    @property
    def is_bookable(self) -> bool:
        return not (self.is_slot_disabled or self.is_auto_disabled)


def count_distinct_bookings(reservations: Iterable[Reservation]) -> int:
    return len({r.booking_key for r in reservations if r.is_live})


def compute_slot_occupancy(
    *,
    slot_id: int,
    on: date,
    table_ids: Iterable[int],
    reservations: Iterable[Reservation],
    override: Optional[SlotAvailabilityOverride] = None,
) -> SlotOccupancy:
    """
    Args:
        slot_id: Slot being evaluated
        on: Calendar day
        table_ids: Every table of the restaurant
        reservations: Reservations of the slot/day (cancelled rows are ignored)
        override: Manual override of (slot, day), None when absent

    Returns:
        SlotOccupancy with the occupied set and the merged disable flags
    """
    known_tables = set(table_ids)
    live = [
        r for r in reservations if r.is_live and r.slot_id == slot_id and r.date == on
    ]
    occupied = frozenset(r.table_id for r in live if r.table_id in known_tables)
    override = override or SlotAvailabilityOverride.default_for(slot_id=slot_id, on=on)
    return SlotOccupancy(
        slot_id=slot_id,
        date=on,
        total_tables=len(known_tables),
        occupied_table_ids=occupied,
        reserved_count=count_distinct_bookings(live),
        is_slot_disabled=override.is_slot_disabled,
        is_indoor_disabled=override.is_indoor_disabled,
        is_outdoor_disabled=override.is_outdoor_disabled,
    )
