from datetime import date
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_dashboard_cache import IDashboardCache
from src.service.dining.domain.dashboard_summary import DashboardSummary, build_dashboard_summary


class GetDashboardSummaryUseCase:
    """
    Cache-aside daily summary

    Hit: decoded summary. Miss (or cache down): recompute from the database,
    then store with TTL. Mutations invalidate the key after they commit.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory, dashboard_cache: IDashboardCache) -> None:
        self.uow_factory = uow_factory
        self.dashboard_cache = dashboard_cache
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        dashboard_cache: IDashboardCache = Depends(Provide[Container.dashboard_cache]),
    ) -> Self:
        return cls(uow_factory=uow_factory, dashboard_cache=dashboard_cache)

    @Logger.io
    async def execute(self, *, restaurant_id: int, on: date) -> DashboardSummary:
        with self.tracer.start_as_current_span(
            'use_case.get_dashboard_summary',
            attributes={'restaurant.id': restaurant_id, 'summary.date': on.isoformat()},
        ) as span:
            cached = await self.dashboard_cache.get(restaurant_id=restaurant_id, on=on)
            span.set_attribute('cache.hit', cached is not None)
            if cached is not None:
                return cached

            async with self.uow_factory() as uow:
                tables = await uow.table_repo.list_by_restaurant(restaurant_id=restaurant_id)
                rows = await uow.reservation_query_repo.list_rows_for_day(
                    restaurant_id=restaurant_id, on=on
                )

            summary = build_dashboard_summary(on=on, total_tables=len(tables), rows=rows)
            await self.dashboard_cache.set(restaurant_id=restaurant_id, on=on, summary=summary)
            return summary
