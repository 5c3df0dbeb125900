from datetime import date
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.dto.availability_dto import SlotView
from src.service.dining.app.service.occupancy_loader import load_slot_views


class ListSlotsUseCase:
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
    async def execute(
        self, *, restaurant_id: int, on: Optional[date] = None, all_slots: bool = False
    ) -> list[SlotView]:
        """
        Staff slot list

        Args:
            restaurant_id: Restaurant ID
            on: Calendar day; slots carry reserved_count and is_auto_disabled for it
            all_slots: Every active slot, without occupancy

        Raises:
            ValidationError: Neither `on` nor `all_slots` given
        """
        async with self.uow_factory() as uow:
            if all_slots:
                slots = await uow.slot_repo.list_active(restaurant_id=restaurant_id)
                return [SlotView(slot=slot) for slot in slots]
            if on is None:
                raise ValidationError('Date or all=true required')
            return await load_slot_views(uow, restaurant_id=restaurant_id, on=on)
