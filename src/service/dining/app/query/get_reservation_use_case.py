from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.dto.reservation_dto import ReservationResult


class GetReservationUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, restaurant_id: int, reservation_id: int) -> ReservationResult:
        """Reservation with every row of its group, 404 when missing or foreign"""
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
        return ReservationResult(reservations=rows, tables=tables)
