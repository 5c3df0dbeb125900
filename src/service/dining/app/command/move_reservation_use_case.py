from datetime import date
from typing import Optional, Self, Sequence

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, NotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.dining.app.dto.reservation_dto import ReservationResult
from src.service.dining.app.service.guest_message_builder import build_guest_message
from src.service.dining.app.service.reservation_side_effects import ReservationSideEffects
from src.service.dining.domain.booking_conflict import (
    collect_table_ids,
    find_conflicts,
    plan_move,
)
from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.enum.notification_type import NotificationType
from src.service.dining.domain.enum.reservation_status import ReservationStatus


MOVED_REASON = 'moved'


class MoveReservationUseCase:
    """
    Move a whole booking to other tables and optionally another slot/date

    All validation happens before the first write. Writes, in one transaction:
    1. Release surplus rows (cancelled with reason "moved")
    2. Relocate the remaining rows in place
    3. Insert rows for surplus target tables, copying the party
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        side_effects: ReservationSideEffects,
        settings: Settings,
    ) -> None:
        self.uow_factory = uow_factory
        self.side_effects = side_effects
        self.settings = settings
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        side_effects: ReservationSideEffects = Depends(
            Provide[Container.reservation_side_effects]
        ),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow_factory=uow_factory, side_effects=side_effects, settings=settings)

    @Logger.io
    async def execute(
        self,
        *,
        restaurant_id: int,
        reservation_id: int,
        table_ids: Sequence[int],
        on: Optional[date] = None,
        slot_id: Optional[int] = None,
    ) -> ReservationResult:
        if not table_ids:
            raise ValidationError('Select at least one table')
        targets = collect_table_ids(None, table_ids)

        with (
            self.tracer.start_as_current_span(
                'use_case.move_reservation',
                attributes={
                    'restaurant.id': restaurant_id,
                    'reservation.id': reservation_id,
                    'reservation.table_count': len(targets),
                },
            ),
            metrics.track_operation('move'),
        ):
            async with self.uow_factory() as uow:
                reservation = await uow.reservation_query_repo.get(
                    restaurant_id=restaurant_id, reservation_id=reservation_id
                )
                if reservation is None:
                    raise NotFoundError('Reservation not found')
                if not reservation.is_live:
                    raise ValidationError('Cancelled reservations cannot be moved')

                rows = (
                    await uow.reservation_query_repo.list_group(group_id=reservation.group_id)
                    if reservation.group_id
                    else [reservation]
                )
                live_rows = [r for r in rows if r.is_live]
                origin_date, origin_slot_id = reservation.date, reservation.slot_id
                dest_date = on or origin_date
                dest_slot_id = slot_id or origin_slot_id
                slot_changed = dest_slot_id != origin_slot_id

                slot = await uow.slot_repo.get(restaurant_id=restaurant_id, slot_id=dest_slot_id)
                if slot is None:
                    raise NotFoundError('Slot not found')

                tables = await uow.table_repo.get_many(
                    restaurant_id=restaurant_id, table_ids=targets
                )
                if len(tables) != len(targets):
                    raise NotFoundError('One or more tables not found')
                tables_by_id = {t.id: t for t in tables}

                live = await uow.reservation_query_repo.list_live_for_slot(
                    restaurant_id=restaurant_id, slot_id=dest_slot_id, on=dest_date
                )
                conflicts = find_conflicts(
                    live_reservations=live,
                    table_ids=targets,
                    exclude_reservation_ids=[r.id for r in live_rows if r.id is not None],
                )
                if conflicts:
                    metrics.record_conflict(operation='move', source='precheck')
                    number = tables_by_id[conflicts[0].table_id].table_number
                    raise ConflictError(f'Table {number} is already booked for this slot')

                plan = plan_move(rows=live_rows, target_table_ids=targets)
                group_id = None
                if plan.resulting_table_count > 1:
                    group_id = reservation.group_id or str(uuid_utils.uuid7())
                custom_start_time = None if slot_changed else reservation.custom_start_time
                rows_by_id = {r.id: r for r in live_rows}

                try:
                    if plan.release_ids:
                        await uow.reservation_command_repo.cancel(
                            reservation_ids=plan.release_ids, reason=MOVED_REASON
                        )
                        await uow.reservation_command_repo.assign_group(
                            reservation_ids=plan.release_ids, group_id=None
                        )

                    placements = [(rid, rows_by_id[rid].table_id) for rid in plan.keep_ids]
                    placements += list(plan.reassign)
                    for rid, table_id in placements:
                        await uow.reservation_command_repo.relocate(
                            reservation_id=rid,
                            table_id=table_id,
                            slot_id=dest_slot_id,
                            on=dest_date,
                            group_id=group_id,
                            custom_start_time=custom_start_time,
                        )

                    added: list[Reservation] = []
                    if plan.add_table_ids:
                        added = await uow.reservation_command_repo.create_many(
                            reservations=[
                                Reservation.book(
                                    table_id=tid,
                                    slot_id=dest_slot_id,
                                    on=dest_date,
                                    party=reservation.party,
                                    group_id=group_id,
                                    custom_start_time=custom_start_time,
                                )
                                for tid in plan.add_table_ids
                            ]
                        )
                    await uow.commit()
                except ConflictError:
                    metrics.record_conflict(operation='move', source='storage')
                    raise

            moved = [
                attrs.evolve(
                    rows_by_id[rid],
                    table_id=table_id,
                    slot_id=dest_slot_id,
                    date=dest_date,
                    group_id=group_id,
                    custom_start_time=custom_start_time,
                )
                for rid, table_id in placements
            ]
            released = [
                attrs.evolve(
                    rows_by_id[rid],
                    status=ReservationStatus.CANCELLED,
                    cancellation_reason=MOVED_REASON,
                    group_id=None,
                )
                for rid in plan.release_ids
            ]
            result = ReservationResult(reservations=moved + added + released, tables=tables)
            Logger.base.info(
                f'🔀 [MOVE-RESERVATION] reservation={reservation_id} '
                f'{origin_date}/slot {origin_slot_id} → {dest_date}/slot {dest_slot_id} '
                f'tables={"+".join(result.table_numbers)} released={list(plan.release_ids)}'
            )

            if (origin_date, origin_slot_id) != (dest_date, dest_slot_id):
                await self.side_effects.reservation_changed(
                    restaurant_id=restaurant_id, on=origin_date, slot_id=origin_slot_id
                )
            await self.side_effects.reservation_changed(
                restaurant_id=restaurant_id,
                on=dest_date,
                slot_id=dest_slot_id,
                guest_message=build_guest_message(
                    notification_type=NotificationType.RESERVATION_MOVED,
                    party=reservation.party,
                    slot=slot,
                    on=dest_date,
                    table_numbers=result.table_numbers,
                    custom_start_time=custom_start_time,
                    settings=self.settings,
                ),
            )
            return result
