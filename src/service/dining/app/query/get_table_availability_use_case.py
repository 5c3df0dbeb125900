from datetime import date
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.dto.availability_dto import TableAvailability, TableState
from src.service.dining.domain.occupancy import compute_slot_occupancy
from src.service.dining.domain.value_object.custom_time_window import CustomTimeWindow


class GetTableAvailabilityUseCase:
    """
    Staff table grid for one slot on one day

    Always read fresh from the database, never from the dashboard cache.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(
        self,
        *,
        restaurant_id: int,
        on: date,
        slot_id: int,
        custom_start_time: Optional[str] = None,
    ) -> TableAvailability:
        with self.tracer.start_as_current_span(
            'use_case.get_table_availability',
            attributes={'restaurant.id': restaurant_id, 'slot.id': slot_id},
        ):
            async with self.uow_factory() as uow:
                slot = await uow.slot_repo.get(restaurant_id=restaurant_id, slot_id=slot_id)
                if slot is None:
                    raise NotFoundError('Slot not found')

                custom_window = (
                    CustomTimeWindow.within_slot(slot=slot, start_time=custom_start_time)
                    if custom_start_time
                    else None
                )
                tables = await uow.table_repo.list_by_restaurant(restaurant_id=restaurant_id)
                live = await uow.reservation_query_repo.list_live_for_slot(
                    restaurant_id=restaurant_id, slot_id=slot_id, on=on
                )
                override = await uow.slot_override_repo.get(slot_id=slot_id, on=on)

            occupancy = compute_slot_occupancy(
                slot_id=slot_id,
                on=on,
                table_ids=[t.id for t in tables if t.id is not None],
                reservations=live,
                override=override,
            )
            holder = {r.table_id: r for r in live}
            return TableAvailability(
                slot=slot,
                occupancy=occupancy,
                tables=[TableState(table=t, reservation=holder.get(t.id)) for t in tables],
                custom_window=custom_window,
            )
