from datetime import date
from typing import Iterable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.dining.app.dto.reservation_dto import ReservationResult
from src.service.dining.app.service.guest_message_builder import build_guest_message
from src.service.dining.app.service.reservation_side_effects import ReservationSideEffects
from src.service.dining.domain.booking_conflict import collect_table_ids, find_conflicts
from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.enum.notification_type import NotificationType
from src.service.dining.domain.value_object.custom_time_window import CustomTimeWindow
from src.service.dining.domain.value_object.party_details import PartyDetails


class CreateReservationUseCase:
    """
    Book one or more tables for a party in a slot on a date

    Flow:
    1. Resolve slot and tables (scoped to the restaurant)
    2. Fast-path conflict check against fresh live rows
    3. Insert one row per table in one transaction (shared group_id when > 1 table)
    4. After commit: invalidate dashboard cache, queue change event + guest message

    The partial unique index is the final arbiter: a concurrent winner surfaces
    as ConflictError at flush/commit.
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
        table_id: int,
        slot_id: int,
        on: date,
        party: PartyDetails,
        merge_table_ids: Iterable[int] = (),
        custom_start_time: Optional[str] = None,
        notification_type: Optional[NotificationType] = None,
    ) -> ReservationResult:
        table_ids = collect_table_ids(table_id, merge_table_ids)

        with (
            self.tracer.start_as_current_span(
                'use_case.create_reservation',
                attributes={
                    'restaurant.id': restaurant_id,
                    'slot.id': slot_id,
                    'reservation.date': on.isoformat(),
                    'reservation.table_count': len(table_ids),
                },
            ),
            metrics.track_operation('create'),
        ):
            async with self.uow_factory() as uow:
                slot = await uow.slot_repo.get(restaurant_id=restaurant_id, slot_id=slot_id)
                if slot is None:
                    raise NotFoundError('Slot not found')

                tables = await uow.table_repo.get_many(
                    restaurant_id=restaurant_id, table_ids=table_ids
                )
                if len(tables) != len(table_ids):
                    raise NotFoundError('One or more tables not found')
                tables_by_id = {t.id: t for t in tables}

                custom_window = (
                    CustomTimeWindow.within_slot(slot=slot, start_time=custom_start_time)
                    if custom_start_time
                    else None
                )

                live = await uow.reservation_query_repo.list_live_for_slot(
                    restaurant_id=restaurant_id, slot_id=slot_id, on=on
                )
                conflicts = find_conflicts(live_reservations=live, table_ids=table_ids)
                if conflicts:
                    metrics.record_conflict(operation='create', source='precheck')
                    table_number = tables_by_id[conflicts[0].table_id].table_number
                    raise ConflictError(f'Table {table_number} is already booked for this slot')

                group_id = str(uuid_utils.uuid7()) if len(table_ids) > 1 else None
                try:
                    rows = await uow.reservation_command_repo.create_many(
                        reservations=[
                            Reservation.book(
                                table_id=tid,
                                slot_id=slot_id,
                                on=on,
                                party=party,
                                group_id=group_id,
                                custom_start_time=custom_window.start_time
                                if custom_window
                                else None,
                            )
                            for tid in table_ids
                        ]
                    )
                    await uow.commit()
                except ConflictError:
                    metrics.record_conflict(operation='create', source='storage')
                    raise

            result = ReservationResult(
                reservations=rows,
                tables=[tables_by_id[tid] for tid in table_ids],
                custom_window=custom_window,
            )
            Logger.base.info(
                f'🍽️ [CREATE-RESERVATION] restaurant={restaurant_id} slot={slot_id} date={on} '
                f'tables={"+".join(result.table_numbers)} group={group_id}'
            )
            if result.exceeds_capacity:
                Logger.base.warning(
                    f'⚠️ [CREATE-RESERVATION] Party of {result.party_size} exceeds '
                    f'capacity {result.total_capacity} of tables {"+".join(result.table_numbers)}'
                )

            await self.side_effects.reservation_changed(
                restaurant_id=restaurant_id,
                on=on,
                slot_id=slot_id,
                guest_message=build_guest_message(
                    notification_type=notification_type or NotificationType.RESERVATION_CONFIRMATION,
                    party=party,
                    slot=slot,
                    on=on,
                    table_numbers=result.table_numbers,
                    custom_start_time=custom_window.start_time if custom_window else None,
                    settings=self.settings,
                ),
            )
            return result
