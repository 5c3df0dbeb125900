"""
Reservation lifecycle against a real database

Test Focus:
1. Multi-table bookings share a group id and read back from any row
2. A table is held at most once per slot and day, also under concurrent writers
3. Cancel releases the whole group and frees the tables
4. Update adds tables to a booking, move keeps and reassigns rows
5. Every read and write is scoped to the caller's restaurant
"""

import asyncio
from unittest.mock import AsyncMock, patch

import attrs
import pytest

from src.platform.exception.exceptions import ConflictError, NotFoundError, ValidationError
from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.enum.reservation_status import ReservationStatus
from src.service.dining.driven_adapter.repo.reservation_query_repo_impl import (
    ReservationQueryRepoImpl,
)
from test.constants import NEXT_SATURDAY, OTHER_RESTAURANT_ID, RESTAURANT_ID, SATURDAY


pytestmark = pytest.mark.integration


@pytest.fixture
async def floor(seed_tables):
    # T1 (4), T2 (2), T3 (6)
    return await seed_tables(('T1', 4), ('T2', 2), ('T3', 6))


@pytest.fixture
async def dinner(seed_slot):
    return await seed_slot(start_time='19:00', end_time='20:30', day_of_week=6)


@pytest.fixture
async def late(seed_slot):
    return await seed_slot(start_time='21:00', end_time='22:30', day_of_week=6)


class TestCreateAndRead:
    @pytest.mark.asyncio
    async def test_group_reads_back_from_any_row(
        self, create_reservation, get_reservation, floor, dinner, party
    ):
        # Given: A party seated on T1+T2
        t1, t2, _ = floor
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=t1.id,
            merge_table_ids=[t2.id],
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )
        ids = [r.id for r in created.reservations]
        group_id = created.reservations[0].group_id

        # Then: One row per table, one group
        assert len(ids) == 2
        assert group_id is not None
        assert {r.group_id for r in created.reservations} == {group_id}

        # When: Read through the second row
        fetched = await get_reservation.execute(restaurant_id=RESTAURANT_ID, reservation_id=ids[1])

        # Then: Whole booking comes back
        assert sorted(r.id for r in fetched.reservations) == sorted(ids)
        assert fetched.lead.id == min(ids)
        assert fetched.table_numbers == ['T1', 'T2']
        assert fetched.lead.party == party

    @pytest.mark.asyncio
    async def test_single_table_has_no_group(self, create_reservation, floor, dinner, party):
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=floor[0].id,
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
            custom_start_time='19:30',
        )

        assert created.reservations[0].group_id is None
        assert created.reservations[0].custom_start_time == '19:30'
        assert created.custom_window.end_time == '21:00'


class TestDoubleBooking:
    @pytest.mark.asyncio
    async def test_second_booking_on_held_table_is_refused(
        self, create_reservation, floor, dinner, party
    ):
        # Given: T2 held
        t1, t2, _ = floor
        await create_reservation.execute(
            restaurant_id=RESTAURANT_ID, table_id=t2.id, slot_id=dinner.id, on=SATURDAY, party=party
        )

        # When/Then: A merge including T2 fails, nothing written for T1
        with pytest.raises(ConflictError, match='Table T2 is already booked for this slot'):
            await create_reservation.execute(
                restaurant_id=RESTAURANT_ID,
                table_id=t1.id,
                merge_table_ids=[t2.id],
                slot_id=dinner.id,
                on=SATURDAY,
                party=party,
            )

        # And: T1 is still free
        await create_reservation.execute(
            restaurant_id=RESTAURANT_ID, table_id=t1.id, slot_id=dinner.id, on=SATURDAY, party=party
        )

    @pytest.mark.asyncio
    async def test_other_slot_and_day_are_independent(
        self, create_reservation, floor, dinner, late, party
    ):
        # Given: T1 held for Saturday dinner
        t1 = floor[0]
        await create_reservation.execute(
            restaurant_id=RESTAURANT_ID, table_id=t1.id, slot_id=dinner.id, on=SATURDAY, party=party
        )

        # When: T1 booked for the late slot and for dinner a week later
        for slot_id, on in ((late.id, SATURDAY), (dinner.id, NEXT_SATURDAY)):
            await create_reservation.execute(
                restaurant_id=RESTAURANT_ID, table_id=t1.id, slot_id=slot_id, on=on, party=party
            )

        # Then: Saturday dinner is still held
        with pytest.raises(ConflictError, match='Table T1 is already booked for this slot'):
            await create_reservation.execute(
                restaurant_id=RESTAURANT_ID,
                table_id=t1.id,
                slot_id=dinner.id,
                on=SATURDAY,
                party=party,
            )

    @pytest.mark.asyncio
    async def test_concurrent_creates_book_the_table_once(
        self, create_reservation, floor, dinner, party
    ):
        # Given: Five writers racing for T1 on the same slot and day
        t1 = floor[0]
        attempts = 5

        # When
        results = await asyncio.gather(
            *(
                create_reservation.execute(
                    restaurant_id=RESTAURANT_ID,
                    table_id=t1.id,
                    slot_id=dinner.id,
                    on=SATURDAY,
                    party=party,
                )
                for _ in range(attempts)
            ),
            return_exceptions=True,
        )

        # Then: Exactly one wins, every other writer gets a conflict
        booked = [r for r in results if not isinstance(r, BaseException)]
        refused = [r for r in results if isinstance(r, ConflictError)]
        assert len(booked) == 1
        assert len(refused) == attempts - 1

        # And: Only one live row holds the table
        async with create_reservation.uow_factory() as uow:
            live = await uow.reservation_query_repo.list_live_for_slot(
                restaurant_id=RESTAURANT_ID, slot_id=dinner.id, on=SATURDAY
            )
        assert [r.table_id for r in live] == [t1.id]
        assert live[0].id == booked[0].reservations[0].id

    @pytest.mark.asyncio
    async def test_unique_index_rejects_stale_precheck(
        self, create_reservation, floor, dinner, party
    ):
        # Given: T1 held
        t1 = floor[0]
        await create_reservation.execute(
            restaurant_id=RESTAURANT_ID, table_id=t1.id, slot_id=dinner.id, on=SATURDAY, party=party
        )

        # When: A second writer whose pre-check saw nothing
        with patch.object(
            ReservationQueryRepoImpl, 'list_live_for_slot', AsyncMock(return_value=[])
        ):
            with pytest.raises(ConflictError, match='Table is already booked for this slot'):
                await create_reservation.execute(
                    restaurant_id=RESTAURANT_ID,
                    table_id=t1.id,
                    slot_id=dinner.id,
                    on=SATURDAY,
                    party=party,
                )

    @pytest.mark.asyncio
    async def test_repository_insert_conflicts_directly(self, uow_factory, floor, dinner, party):
        t1 = floor[0]
        booking = dict(table_id=t1.id, slot_id=dinner.id, on=SATURDAY, party=party)
        async with uow_factory() as uow:
            await uow.reservation_command_repo.create_many(reservations=[Reservation.book(**booking)])
            await uow.commit()

        async with uow_factory() as uow:
            with pytest.raises(ConflictError):
                await uow.reservation_command_repo.create_many(
                    reservations=[Reservation.book(**booking)]
                )


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_through_any_row_frees_every_table(
        self, create_reservation, cancel_reservation, floor, dinner, party
    ):
        # Given: T1+T2
        t1, t2, _ = floor
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=t1.id,
            merge_table_ids=[t2.id],
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )
        non_lead = max(r.id for r in created.reservations)

        # When
        result = await cancel_reservation.execute(
            restaurant_id=RESTAURANT_ID, reservation_id=non_lead, reason='  guest called  '
        )

        # Then: Both rows cancelled with the trimmed reason
        assert {r.status for r in result.reservations} == {ReservationStatus.CANCELLED}
        assert {r.cancellation_reason for r in result.reservations} == {'guest called'}

        # And: Tables are free again for the same slot
        rebooked = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=t1.id,
            merge_table_ids=[t2.id],
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )
        assert len(rebooked.reservations) == 2

    @pytest.mark.asyncio
    async def test_second_cancel_changes_nothing(
        self, create_reservation, cancel_reservation, floor, dinner, party, side_effect_queue
    ):
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=floor[0].id,
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )
        rid = created.reservations[0].id
        await cancel_reservation.execute(restaurant_id=RESTAURANT_ID, reservation_id=rid, reason='x')
        await side_effect_queue.drain()

        again = await cancel_reservation.execute(
            restaurant_id=RESTAURANT_ID, reservation_id=rid, reason='other'
        )

        assert again.reservations[0].cancellation_reason == 'x'
        assert side_effect_queue.pending == 0


class TestUpdate:
    @pytest.mark.asyncio
    async def test_adding_a_table_groups_a_standalone_booking(
        self, create_reservation, update_reservation, get_reservation, floor, dinner, party
    ):
        # Given: Standalone on T1
        t1, t2, _ = floor
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID, table_id=t1.id, slot_id=dinner.id, on=SATURDAY, party=party
        )
        rid = created.reservations[0].id
        bigger = attrs.evolve(party, adults=6)

        # When
        await update_reservation.execute(
            restaurant_id=RESTAURANT_ID, reservation_id=rid, party=bigger, add_table_ids=[t2.id]
        )

        # Then: Two rows, one group, new party everywhere
        fetched = await get_reservation.execute(restaurant_id=RESTAURANT_ID, reservation_id=rid)
        assert fetched.table_numbers == ['T1', 'T2']
        assert len({r.group_id for r in fetched.reservations}) == 1
        assert fetched.reservations[0].group_id is not None
        assert {r.party.adults for r in fetched.reservations} == {6}

    @pytest.mark.asyncio
    async def test_cancelled_booking_cannot_be_edited(
        self, create_reservation, cancel_reservation, update_reservation, floor, dinner, party
    ):
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=floor[0].id,
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )
        rid = created.reservations[0].id
        await cancel_reservation.execute(restaurant_id=RESTAURANT_ID, reservation_id=rid)

        with pytest.raises(ValidationError):
            await update_reservation.execute(
                restaurant_id=RESTAURANT_ID, reservation_id=rid, party=party
            )


class TestMove:
    @pytest.mark.asyncio
    async def test_group_keeps_overlapping_table_and_reassigns_the_other(
        self, create_reservation, move_reservation, get_reservation, floor, dinner, party
    ):
        # Given: T1+T2
        t1, t2, t3 = floor
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=t1.id,
            merge_table_ids=[t2.id],
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )
        ids = sorted(r.id for r in created.reservations)

        # When: Move to T2+T3
        await move_reservation.execute(
            restaurant_id=RESTAURANT_ID, reservation_id=ids[0], table_ids=[t2.id, t3.id]
        )

        # Then: Same rows, now on T2 and T3
        fetched = await get_reservation.execute(restaurant_id=RESTAURANT_ID, reservation_id=ids[0])
        assert sorted(r.id for r in fetched.live_reservations) == ids
        assert fetched.table_numbers == ['T2', 'T3']

    @pytest.mark.asyncio
    async def test_shrinking_releases_surplus_rows(
        self, create_reservation, move_reservation, get_reservation, floor, dinner, party
    ):
        t1, t2, t3 = floor
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=t1.id,
            merge_table_ids=[t2.id],
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )
        lead_id = min(r.id for r in created.reservations)

        result = await move_reservation.execute(
            restaurant_id=RESTAURANT_ID, reservation_id=lead_id, table_ids=[t3.id]
        )

        assert result.table_numbers == ['T3']
        released = [r for r in result.reservations if not r.is_live]
        assert [r.cancellation_reason for r in released] == ['moved']
        fetched = await get_reservation.execute(restaurant_id=RESTAURANT_ID, reservation_id=lead_id)
        assert fetched.reservations[0].group_id is None
        assert fetched.table_numbers == ['T3']

    @pytest.mark.asyncio
    async def test_moving_to_another_slot_clears_custom_time(
        self, create_reservation, move_reservation, floor, dinner, late, party
    ):
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=floor[0].id,
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
            custom_start_time='19:30',
        )
        rid = created.reservations[0].id

        result = await move_reservation.execute(
            restaurant_id=RESTAURANT_ID, reservation_id=rid, table_ids=[floor[0].id], slot_id=late.id
        )

        moved = result.live_reservations[0]
        assert (moved.id, moved.slot_id, moved.custom_start_time) == (rid, late.id, None)

        # And: The dinner slot is free again on T1
        await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=floor[0].id,
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )

    @pytest.mark.asyncio
    async def test_move_onto_held_table_is_refused(
        self, create_reservation, move_reservation, floor, dinner, party
    ):
        t1, t2, _ = floor
        mine = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID, table_id=t1.id, slot_id=dinner.id, on=SATURDAY, party=party
        )
        await create_reservation.execute(
            restaurant_id=RESTAURANT_ID, table_id=t2.id, slot_id=dinner.id, on=SATURDAY, party=party
        )

        with pytest.raises(ConflictError, match='Table T2 is already booked'):
            await move_reservation.execute(
                restaurant_id=RESTAURANT_ID,
                reservation_id=mine.reservations[0].id,
                table_ids=[t2.id],
            )


class TestRestaurantScoping:
    @pytest.mark.asyncio
    async def test_foreign_restaurant_sees_nothing(
        self, create_reservation, get_reservation, cancel_reservation, floor, dinner, party
    ):
        created = await create_reservation.execute(
            restaurant_id=RESTAURANT_ID,
            table_id=floor[0].id,
            slot_id=dinner.id,
            on=SATURDAY,
            party=party,
        )
        rid = created.reservations[0].id

        with pytest.raises(NotFoundError):
            await get_reservation.execute(restaurant_id=OTHER_RESTAURANT_ID, reservation_id=rid)
        with pytest.raises(NotFoundError):
            await cancel_reservation.execute(restaurant_id=OTHER_RESTAURANT_ID, reservation_id=rid)
        with pytest.raises(NotFoundError, match='Slot not found'):
            await create_reservation.execute(
                restaurant_id=OTHER_RESTAURANT_ID,
                table_id=floor[1].id,
                slot_id=dinner.id,
                on=SATURDAY,
                party=party,
            )
