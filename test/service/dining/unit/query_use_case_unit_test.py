"""
Unit tests for the read side: slot lists, table grid, dashboard cache-aside and the change stream
"""

from unittest.mock import AsyncMock

import attrs
import pytest

from src.platform.exception.exceptions import NotFoundError, ValidationError
from src.service.dining.app.query.get_dashboard_summary_use_case import (
    GetDashboardSummaryUseCase,
)
from src.service.dining.app.query.get_table_availability_use_case import (
    GetTableAvailabilityUseCase,
)
from src.service.dining.app.query.list_bookable_slots_use_case import ListBookableSlotsUseCase
from src.service.dining.app.query.list_slots_use_case import ListSlotsUseCase
from src.service.dining.app.query.stream_reservation_updates_use_case import (
    CONNECTED_EVENT,
    StreamReservationUpdatesUseCase,
)
from src.service.dining.domain.dashboard_summary import DashboardSummary
from src.service.dining.domain.entity.slot_availability_override_entity import (
    SlotAvailabilityOverride,
)
from src.service.dining.domain.entity.slot_entity import Slot
from test.constants import RESTAURANT_ID, SATURDAY
from test.service.dining.fakes import live_row


pytestmark = pytest.mark.unit


@pytest.fixture
def day_slots(saturday_slot) -> list[Slot]:
    brunch = attrs.evolve(saturday_slot, id=4, start_time='12:00', end_time='14:00')
    late = attrs.evolve(saturday_slot, id=5, start_time='21:00', end_time='22:30')
    return [brunch, saturday_slot, late]


@pytest.fixture(autouse=True)
def _repos(uow, tables, day_slots, party):
    uow.slot_repo.list_active_for_date.return_value = day_slots
    uow.table_repo.list_by_restaurant.return_value = tables
    # Slot 3 is full, slot 4 has one booking over two tables
    uow.reservation_query_repo.list_live_for_day.return_value = [
        live_row(1, 1, party, on=SATURDAY, slot_id=3),
        live_row(2, 2, party, on=SATURDAY, slot_id=3),
        live_row(3, 3, party, on=SATURDAY, slot_id=3),
        live_row(4, 1, party, on=SATURDAY, slot_id=4, group_id='g'),
        live_row(5, 2, party, on=SATURDAY, slot_id=4, group_id='g'),
    ]
    # Slot 5 is manually switched off
    uow.slot_override_repo.list_for_date.return_value = [
        SlotAvailabilityOverride(slot_id=5, date=SATURDAY, is_slot_disabled=True)
    ]


class TestListSlots:
    @pytest.fixture
    def use_case(self, mock_uow_factory) -> ListSlotsUseCase:
        return ListSlotsUseCase(uow_factory=mock_uow_factory)

    @pytest.mark.asyncio
    async def test_date_listing_carries_occupancy(self, use_case):
        views = await use_case.execute(restaurant_id=RESTAURANT_ID, on=SATURDAY)

        by_id = {v.slot.id: v for v in views}
        assert (by_id[3].reserved_count, by_id[3].is_auto_disabled) == (3, True)
        assert (by_id[4].reserved_count, by_id[4].is_auto_disabled) == (1, False)
        assert by_id[5].occupancy.is_slot_disabled is True

    @pytest.mark.asyncio
    async def test_all_slots_without_occupancy(self, use_case, uow, day_slots):
        uow.slot_repo.list_active.return_value = day_slots

        views = await use_case.execute(restaurant_id=RESTAURANT_ID, all_slots=True)

        assert [v.occupancy for v in views] == [None, None, None]
        assert [v.reserved_count for v in views] == [0, 0, 0]

    @pytest.mark.asyncio
    async def test_requires_date_or_all(self, use_case):
        with pytest.raises(ValidationError, match='Date or all=true required'):
            await use_case.execute(restaurant_id=RESTAURANT_ID)


class TestListBookableSlots:
    @pytest.mark.asyncio
    async def test_hides_full_and_disabled_slots(self, mock_uow_factory):
        use_case = ListBookableSlotsUseCase(uow_factory=mock_uow_factory)

        views = await use_case.execute(restaurant_id=RESTAURANT_ID, on=SATURDAY)

        assert [v.slot.id for v in views] == [4]

    @pytest.mark.asyncio
    async def test_day_without_slots(self, mock_uow_factory, uow):
        uow.slot_repo.list_active_for_date.return_value = []
        use_case = ListBookableSlotsUseCase(uow_factory=mock_uow_factory)

        assert await use_case.execute(restaurant_id=RESTAURANT_ID, on=SATURDAY) == []
        uow.table_repo.list_by_restaurant.assert_not_awaited()


class TestGetTableAvailability:
    @pytest.fixture
    def use_case(self, mock_uow_factory) -> GetTableAvailabilityUseCase:
        return GetTableAvailabilityUseCase(uow_factory=mock_uow_factory)

    @pytest.mark.asyncio
    async def test_grid_marks_held_tables(self, use_case, uow, saturday_slot, party):
        uow.slot_repo.get.return_value = saturday_slot
        uow.reservation_query_repo.list_live_for_slot.return_value = [
            live_row(9, 2, party, on=SATURDAY)
        ]
        uow.slot_override_repo.get.return_value = None

        availability = await use_case.execute(
            restaurant_id=RESTAURANT_ID, on=SATURDAY, slot_id=3, custom_start_time='20:00'
        )

        assert [(s.table.table_number, s.is_occupied) for s in availability.tables] == [
            ('T1', False),
            ('T2', True),
            ('T10', False),
        ]
        assert availability.tables[1].reservation.id == 9
        assert availability.occupancy.occupied_count == 1
        assert availability.custom_window.end_time == '21:30'

    @pytest.mark.asyncio
    async def test_unknown_slot(self, use_case, uow):
        uow.slot_repo.get.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.execute(restaurant_id=RESTAURANT_ID, on=SATURDAY, slot_id=3)


class TestGetDashboardSummary:
    @pytest.mark.asyncio
    async def test_cache_hit_skips_database(self, uow, dashboard_cache):
        cached = DashboardSummary(
            date=SATURDAY, total_tables=3, bookings_count=1, guests_count=2, reservations=[]
        )
        dashboard_cache.get.return_value = cached
        factory = AsyncMock()
        use_case = GetDashboardSummaryUseCase(uow_factory=factory, dashboard_cache=dashboard_cache)

        summary = await use_case.execute(restaurant_id=RESTAURANT_ID, on=SATURDAY)

        assert summary is cached
        factory.assert_not_called()
        dashboard_cache.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_miss_computes_and_stores(self, mock_uow_factory, uow, dashboard_cache):
        dashboard_cache.get.return_value = None
        uow.reservation_query_repo.list_rows_for_day.return_value = []
        use_case = GetDashboardSummaryUseCase(
            uow_factory=mock_uow_factory, dashboard_cache=dashboard_cache
        )

        summary = await use_case.execute(restaurant_id=RESTAURANT_ID, on=SATURDAY)

        assert summary.total_tables == 3
        assert summary.bookings_count == 0
        dashboard_cache.set.assert_awaited_once_with(
            restaurant_id=RESTAURANT_ID, on=SATURDAY, summary=summary
        )


class TestStreamReservationUpdates:
    @pytest.mark.asyncio
    async def test_connected_event_then_channel_events(self):
        published = [{'event_type': 'reservation:update', 'restaurant_id': 1}]

        class _Notifier:
            def __init__(self):
                self.channels = []

            async def subscribe(self, *, channel):
                self.channels.append(channel)
                for event in published:
                    yield event

        notifier = _Notifier()
        use_case = StreamReservationUpdatesUseCase(change_notifier=notifier)

        events = [e async for e in use_case.stream(restaurant_id=RESTAURANT_ID)]

        assert events[0] == {'event_type': CONNECTED_EVENT, 'restaurant_id': RESTAURANT_ID}
        assert events[1:] == published
        assert notifier.channels == ['restaurant_1']
