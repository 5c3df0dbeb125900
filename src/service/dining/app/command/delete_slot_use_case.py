from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_dashboard_cache import IDashboardCache
from src.service.dining.app.service.reservation_side_effects import ReservationSideEffects
from src.service.dining.domain.enum.change_event_type import ChangeEventType


class DeleteSlotUseCase:
    """
    Hard delete a slot and its per-date overrides

    Reservations are not checked: rows of any status keep their slot_id and
    date, so they stay listed on the dashboard without a slot window.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        dashboard_cache: IDashboardCache,
        side_effects: ReservationSideEffects,
    ) -> None:
        self.uow_factory = uow_factory
        self.dashboard_cache = dashboard_cache
        self.side_effects = side_effects
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        dashboard_cache: IDashboardCache = Depends(Provide[Container.dashboard_cache]),
        side_effects: ReservationSideEffects = Depends(
            Provide[Container.reservation_side_effects]
        ),
    ) -> Self:
        return cls(
            uow_factory=uow_factory, dashboard_cache=dashboard_cache, side_effects=side_effects
        )

    @Logger.io
    async def execute(self, *, restaurant_id: int, slot_id: int) -> None:
        with self.tracer.start_as_current_span(
            'use_case.delete_slot',
            attributes={'restaurant.id': restaurant_id, 'slot.id': slot_id},
        ):
            async with self.uow_factory() as uow:
                slot = await uow.slot_repo.get(restaurant_id=restaurant_id, slot_id=slot_id)
                if slot is None:
                    raise NotFoundError('Slot not found')

                await uow.slot_repo.delete(slot_id=slot_id)
                await uow.commit()

            Logger.base.info(f'🗑️ [DELETE-SLOT] restaurant={restaurant_id} slot={slot_id}')
            # Rows of the slot lose their display time on every cached day
            await self.dashboard_cache.invalidate_restaurant(restaurant_id=restaurant_id)
            self.side_effects.publish_change(
                restaurant_id=restaurant_id,
                event_type=ChangeEventType.SLOT_AVAILABILITY_UPDATE,
                slot_id=slot_id,
            )
