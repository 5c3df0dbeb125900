from datetime import date
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.dining.domain.entity.slot_availability_override_entity import (
    SlotAvailabilityOverride,
)


class ListSlotOverridesUseCase:
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
    async def execute(self, *, restaurant_id: int, on: date) -> list[SlotAvailabilityOverride]:
        async with self.uow_factory() as uow:
            return await uow.slot_override_repo.list_for_date(restaurant_id=restaurant_id, on=on)
