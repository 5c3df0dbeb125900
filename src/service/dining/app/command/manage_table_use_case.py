from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_dashboard_cache import IDashboardCache
from src.service.dining.app.service.reservation_side_effects import ReservationSideEffects
from src.service.dining.domain.entity.table_entity import Table
from src.service.dining.domain.enum.change_event_type import ChangeEventType


class ManageTableUseCase:
    """
    Table registry mutations

    `total_tables` is part of every cached day, so each mutation drops all
    cached summaries of the restaurant.
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

    async def _registry_changed(self, *, restaurant_id: int) -> None:
        await self.dashboard_cache.invalidate_restaurant(restaurant_id=restaurant_id)
        self.side_effects.publish_change(
            restaurant_id=restaurant_id, event_type=ChangeEventType.TABLE_UPDATE
        )

    @Logger.io
    async def create(self, *, restaurant_id: int, table_number: str, capacity: int) -> Table:
        table = Table.create(
            restaurant_id=restaurant_id, table_number=table_number, capacity=capacity
        )
        with self.tracer.start_as_current_span(
            'use_case.create_table', attributes={'restaurant.id': restaurant_id}
        ):
            async with self.uow_factory() as uow:
                if await uow.table_repo.get_by_number(
                    restaurant_id=restaurant_id, table_number=table.table_number
                ):
                    raise ConflictError(f'Table {table.table_number} already exists')
                table = await uow.table_repo.create(table=table)
                await uow.commit()

            Logger.base.info(
                f'🪑 [TABLE] Created {table.table_number} (capacity {table.capacity}) '
                f'restaurant={restaurant_id}'
            )
            await self._registry_changed(restaurant_id=restaurant_id)
            return table

    @Logger.io
    async def update(
        self,
        *,
        restaurant_id: int,
        table_id: int,
        table_number: Optional[str] = None,
        capacity: Optional[int] = None,
    ) -> Table:
        with self.tracer.start_as_current_span(
            'use_case.update_table',
            attributes={'restaurant.id': restaurant_id, 'table.id': table_id},
        ):
            async with self.uow_factory() as uow:
                current = await uow.table_repo.get(restaurant_id=restaurant_id, table_id=table_id)
                if current is None:
                    raise NotFoundError('Table not found')

                validated = Table.create(
                    restaurant_id=restaurant_id,
                    table_number=current.table_number if table_number is None else table_number,
                    capacity=current.capacity if capacity is None else capacity,
                )
                if validated.table_number != current.table_number:
                    clash = await uow.table_repo.get_by_number(
                        restaurant_id=restaurant_id, table_number=validated.table_number
                    )
                    if clash is not None:
                        raise ConflictError(f'Table {validated.table_number} already exists')

                table = await uow.table_repo.update(table=attrs.evolve(validated, id=table_id))
                await uow.commit()

            Logger.base.info(f'🪑 [TABLE] Updated table={table_id} restaurant={restaurant_id}')
            await self._registry_changed(restaurant_id=restaurant_id)
            return table

    @Logger.io
    async def delete(self, *, restaurant_id: int, table_id: int) -> None:
        with self.tracer.start_as_current_span(
            'use_case.delete_table',
            attributes={'restaurant.id': restaurant_id, 'table.id': table_id},
        ):
            async with self.uow_factory() as uow:
                table = await uow.table_repo.get(restaurant_id=restaurant_id, table_id=table_id)
                if table is None:
                    raise NotFoundError('Table not found')
                if await uow.reservation_query_repo.has_live_for_table(table_id=table_id):
                    raise ConflictError(
                        f'Table {table.table_number} has active reservations, move or cancel them first'
                    )

                await uow.table_repo.delete(table_id=table_id)
                await uow.commit()

            Logger.base.info(f'🗑️ [TABLE] Deleted table={table_id} restaurant={restaurant_id}')
            await self._registry_changed(restaurant_id=restaurant_id)
