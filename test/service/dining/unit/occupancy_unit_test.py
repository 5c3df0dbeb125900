"""
Unit tests for the occupancy rules

Test Focus:
1. Occupied set only counts live rows of the slot/day on known tables
2. reserved_count counts bookings, not rows (a group is one booking)
3. Auto-disable once every table is taken
4. Manual override flags merged in, missing override means all False
"""

from datetime import date

import pytest

from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.entity.slot_availability_override_entity import (
    SlotAvailabilityOverride,
)
from src.service.dining.domain.enum.reservation_status import ReservationStatus
from src.service.dining.domain.occupancy import compute_slot_occupancy, count_distinct_bookings
from src.service.dining.domain.value_object.party_details import PartyDetails


pytestmark = pytest.mark.unit

ON = date(2025, 6, 14)
PARTY = PartyDetails.create(customer_name='Guest', contact='9876543210', adults=2)


def _row(
    rid: int,
    table_id: int,
    *,
    slot_id: int = 1,
    on: date = ON,
    group_id: str | None = None,
    status: ReservationStatus = ReservationStatus.BOOKED,
) -> Reservation:
    return Reservation(
        id=rid,
        table_id=table_id,
        slot_id=slot_id,
        date=on,
        party=PARTY,
        group_id=group_id,
        status=status,
    )


class TestComputeSlotOccupancy:
    def test_empty_slot_is_bookable(self):
        # When: No reservations
        occupancy = compute_slot_occupancy(slot_id=1, on=ON, table_ids=[1, 2, 3], reservations=[])

        # Then
        assert occupancy.occupied_table_ids == frozenset()
        assert occupancy.reserved_count == 0
        assert occupancy.total_tables == 3
        assert occupancy.is_auto_disabled is False
        assert occupancy.is_bookable is True

    def test_ignores_cancelled_other_slot_other_day_and_unknown_tables(self):
        # Given: Only the first row is live, in this slot, on this day, on a known table
        rows = [
            _row(1, 1),
            _row(2, 2, status=ReservationStatus.CANCELLED),
            _row(3, 2, slot_id=9),
            _row(4, 3, on=date(2025, 6, 15)),
            _row(5, 99),
        ]

        # When
        occupancy = compute_slot_occupancy(slot_id=1, on=ON, table_ids=[1, 2, 3], reservations=rows)

        # Then
        assert occupancy.occupied_table_ids == frozenset({1})
        assert occupancy.occupied_count == 1

    def test_group_counts_as_one_booking(self):
        # Given: One group over two tables plus one standalone row
        rows = [_row(1, 1, group_id='g-1'), _row(2, 2, group_id='g-1'), _row(3, 3)]

        # When
        occupancy = compute_slot_occupancy(
            slot_id=1, on=ON, table_ids=[1, 2, 3, 4], reservations=rows
        )

        # Then: Three tables occupied, two bookings
        assert occupancy.occupied_count == 3
        assert occupancy.reserved_count == 2

    def test_auto_disabled_when_every_table_taken(self):
        # Given: Both tables of the restaurant are held
        rows = [_row(1, 1), _row(2, 2)]

        # When
        occupancy = compute_slot_occupancy(slot_id=1, on=ON, table_ids=[1, 2], reservations=rows)

        # Then
        assert occupancy.is_auto_disabled is True
        assert occupancy.is_bookable is False

    def test_restaurant_without_tables_is_never_auto_disabled(self):
        occupancy = compute_slot_occupancy(slot_id=1, on=ON, table_ids=[], reservations=[])

        assert occupancy.is_auto_disabled is False

    def test_override_flags_are_merged(self):
        # Given: Outdoor seating switched off, slot itself still on
        override = SlotAvailabilityOverride(slot_id=1, date=ON, is_outdoor_disabled=True)

        # When
        occupancy = compute_slot_occupancy(
            slot_id=1, on=ON, table_ids=[1], reservations=[], override=override
        )

        # Then: Zone flags are informational, the slot stays bookable
        assert occupancy.is_outdoor_disabled is True
        assert occupancy.is_indoor_disabled is False
        assert occupancy.is_slot_disabled is False
        assert occupancy.is_bookable is True

    def test_manually_disabled_slot_is_not_bookable(self):
        override = SlotAvailabilityOverride(slot_id=1, date=ON, is_slot_disabled=True)

        occupancy = compute_slot_occupancy(
            slot_id=1, on=ON, table_ids=[1, 2], reservations=[], override=override
        )

        assert occupancy.is_slot_disabled is True
        assert occupancy.is_auto_disabled is False
        assert occupancy.is_bookable is False


class TestCountDistinctBookings:
    def test_standalone_rows_count_individually(self):
        assert count_distinct_bookings([_row(1, 1), _row(2, 2)]) == 2

    def test_cancelled_rows_are_not_counted(self):
        rows = [_row(1, 1, status=ReservationStatus.CANCELLED), _row(2, 2, group_id='g')]

        assert count_distinct_bookings(rows) == 1
