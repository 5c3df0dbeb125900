from typing import Iterable, Optional, Self

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
from src.service.dining.domain.booking_conflict import find_conflicts
from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.enum.notification_type import NotificationType
from src.service.dining.domain.value_object.party_details import PartyDetails


class UpdateReservationUseCase:
    """
    Edit the party details of a booking and optionally seat it on extra tables

    Date, slot and status are never touched here (see move/cancel).
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
        party: PartyDetails,
        add_table_ids: Iterable[int] = (),
        notification_type: Optional[NotificationType] = None,
    ) -> ReservationResult:
        with (
            self.tracer.start_as_current_span(
                'use_case.update_reservation',
                attributes={'restaurant.id': restaurant_id, 'reservation.id': reservation_id},
            ),
            metrics.track_operation('update'),
        ):
            async with self.uow_factory() as uow:
                reservation = await uow.reservation_query_repo.get(
                    restaurant_id=restaurant_id, reservation_id=reservation_id
                )
                if reservation is None:
                    raise NotFoundError('Reservation not found')
                if not reservation.is_live:
                    raise ValidationError('Cancelled reservations cannot be edited')

                rows = (
                    await uow.reservation_query_repo.list_group(group_id=reservation.group_id)
                    if reservation.group_id
                    else [reservation]
                )
                live_rows = [r for r in rows if r.is_live]
                seated = {r.table_id for r in live_rows}
                new_table_ids = [t for t in dict.fromkeys(add_table_ids) if t not in seated]

                group_id = reservation.group_id
                added: list[Reservation] = []
                if new_table_ids:
                    new_tables = await uow.table_repo.get_many(
                        restaurant_id=restaurant_id, table_ids=new_table_ids
                    )
                    if len(new_tables) != len(new_table_ids):
                        raise NotFoundError('One or more tables not found')

                    live = await uow.reservation_query_repo.list_live_for_slot(
                        restaurant_id=restaurant_id, slot_id=reservation.slot_id, on=reservation.date
                    )
                    conflicts = find_conflicts(
                        live_reservations=live,
                        table_ids=new_table_ids,
                        exclude_reservation_ids=[r.id for r in live_rows if r.id is not None],
                    )
                    if conflicts:
                        metrics.record_conflict(operation='update', source='precheck')
                        number = {t.id: t.table_number for t in new_tables}[conflicts[0].table_id]
                        raise ConflictError(f'Table {number} is already booked for this slot')

                    if group_id is None:
                        group_id = str(uuid_utils.uuid7())
                        await uow.reservation_command_repo.assign_group(
                            reservation_ids=[reservation.id], group_id=group_id
                        )

                try:
                    await uow.reservation_command_repo.update_party(
                        reservation_ids=[r.id for r in rows if r.id is not None], party=party
                    )
                    if new_table_ids:
                        added = await uow.reservation_command_repo.create_many(
                            reservations=[
                                Reservation.book(
                                    table_id=tid,
                                    slot_id=reservation.slot_id,
                                    on=reservation.date,
                                    party=party,
                                    group_id=group_id,
                                    custom_start_time=reservation.custom_start_time,
                                )
                                for tid in new_table_ids
                            ]
                        )
                    slot = await uow.slot_repo.get(
                        restaurant_id=restaurant_id, slot_id=reservation.slot_id
                    )
                    tables = await uow.table_repo.get_many(
                        restaurant_id=restaurant_id,
                        table_ids=[r.table_id for r in live_rows] + new_table_ids,
                    )
                    await uow.commit()
                except ConflictError:
                    metrics.record_conflict(operation='update', source='storage')
                    raise

            result = ReservationResult(
                reservations=[
                    attrs.evolve(r, party=party, group_id=group_id if r.is_live else r.group_id)
                    for r in rows
                ]
                + added,
                tables=tables,
            )
            Logger.base.info(
                f'✏️ [UPDATE-RESERVATION] reservation={reservation_id} '
                f'tables={"+".join(result.table_numbers)} added={new_table_ids}'
            )

            guest_message = None
            if notification_type is not None and slot is not None:
                guest_message = build_guest_message(
                    notification_type=notification_type,
                    party=party,
                    slot=slot,
                    on=reservation.date,
                    table_numbers=result.table_numbers,
                    custom_start_time=reservation.custom_start_time,
                    settings=self.settings,
                )
            await self.side_effects.reservation_changed(
                restaurant_id=restaurant_id,
                on=reservation.date,
                slot_id=reservation.slot_id,
                guest_message=guest_message,
            )
            return result
