from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.dining.app.dto.reservation_dto import ReservationResult
from src.service.dining.app.service.reservation_side_effects import ReservationSideEffects


class CancelReservationUseCase:
    """
    Cancel every live row of a booking (the group, or the single row)

    Cancelling an already cancelled booking is a no-op that returns its rows
    and triggers no side effects.
    """

    def __init__(
        self, *, uow_factory: UnitOfWorkFactory, side_effects: ReservationSideEffects
    ) -> None:
        self.uow_factory = uow_factory
        self.side_effects = side_effects
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        side_effects: ReservationSideEffects = Depends(
            Provide[Container.reservation_side_effects]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, side_effects=side_effects)

    @Logger.io
    async def execute(
        self, *, restaurant_id: int, reservation_id: int, reason: Optional[str] = None
    ) -> ReservationResult:
        reason = (reason or '').strip() or None

        with (
            self.tracer.start_as_current_span(
                'use_case.cancel_reservation',
                attributes={'restaurant.id': restaurant_id, 'reservation.id': reservation_id},
            ),
            metrics.track_operation('cancel'),
        ):
            async with self.uow_factory() as uow:
                reservation = await uow.reservation_query_repo.get(
                    restaurant_id=restaurant_id, reservation_id=reservation_id
                )
                if reservation is None:
                    raise NotFoundError('Reservation not found')

                rows = (
                    await uow.reservation_query_repo.list_group(group_id=reservation.group_id)
                    if reservation.group_id
                    else [reservation]
                )
                tables = await uow.table_repo.get_many(
                    restaurant_id=restaurant_id, table_ids=[r.table_id for r in rows]
                )
                live_ids = [r.id for r in rows if r.is_live and r.id is not None]
                if not live_ids:
                    Logger.base.info(
                        f'[CANCEL-RESERVATION] reservation={reservation_id} already cancelled'
                    )
                    return ReservationResult(reservations=rows, tables=tables)

                await uow.reservation_command_repo.cancel(reservation_ids=live_ids, reason=reason)
                await uow.commit()

            cancelled = [r.cancel(reason=reason) if r.id in live_ids else r for r in rows]
            Logger.base.info(
                f'🗑️ [CANCEL-RESERVATION] reservation={reservation_id} '
                f'cancelled rows={live_ids} reason={reason}'
            )
            await self.side_effects.reservation_changed(
                restaurant_id=restaurant_id, on=reservation.date, slot_id=reservation.slot_id
            )
            return ReservationResult(reservations=cancelled, tables=tables)
