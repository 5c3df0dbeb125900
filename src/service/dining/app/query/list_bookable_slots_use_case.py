from datetime import date
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.dto.availability_dto import SlotView
from src.service.dining.app.service.occupancy_loader import load_slot_views


class ListBookableSlotsUseCase:
    """Customer-facing slot list: disabled and fully booked slots are hidden"""

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
    async def execute(self, *, restaurant_id: int, on: date) -> list[SlotView]:
        async with self.uow_factory() as uow:
            views = await load_slot_views(uow, restaurant_id=restaurant_id, on=on)
        return [v for v in views if v.occupancy is not None and v.occupancy.is_bookable]
