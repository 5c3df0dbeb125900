from datetime import date
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_slot_repo import ISlotRepo
from src.service.dining.domain.entity.slot_entity import Slot
from src.service.dining.domain.value_object.wall_clock import day_of_week
from src.service.dining.driven_adapter.model.slot_availability_model import (
    SlotAvailabilityModel,
)
from src.service.dining.driven_adapter.model.slot_model import SlotModel


class SlotRepoImpl(ISlotRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: SlotModel) -> Slot:
        return Slot(
            id=model.id,
            restaurant_id=model.restaurant_id,
            start_time=model.start_time,
            end_time=model.end_time,
            day_of_week=model.day_of_week,
            specific_date=model.specific_date,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def list_active(self, *, restaurant_id: int) -> list[Slot]:
        result = await self.session.execute(
            select(SlotModel)
            .where(SlotModel.restaurant_id == restaurant_id, SlotModel.is_active.is_(True))
            .order_by(
                SlotModel.day_of_week.is_(None),
                SlotModel.day_of_week,
                SlotModel.specific_date,
                SlotModel.start_time,
                SlotModel.id,
            )
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def list_active_for_date(self, *, restaurant_id: int, on: date) -> list[Slot]:
        result = await self.session.execute(
            select(SlotModel)
            .where(
                SlotModel.restaurant_id == restaurant_id,
                SlotModel.is_active.is_(True),
                or_(SlotModel.day_of_week == day_of_week(on), SlotModel.specific_date == on),
            )
            .order_by(SlotModel.start_time, SlotModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def get(self, *, restaurant_id: int, slot_id: int) -> Optional[Slot]:
        result = await self.session.execute(
            select(SlotModel).where(
                SlotModel.id == slot_id, SlotModel.restaurant_id == restaurant_id
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def create(self, *, slot: Slot) -> Slot:
        model = SlotModel(
            restaurant_id=slot.restaurant_id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            day_of_week=slot.day_of_week,
            specific_date=slot.specific_date,
            is_active=slot.is_active,
            created_at=slot.created_at,
            updated_at=slot.updated_at,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    @Logger.io
    async def delete(self, *, slot_id: int) -> None:
        await self.session.execute(
            delete(SlotAvailabilityModel).where(SlotAvailabilityModel.slot_id == slot_id)
        )
        await self.session.execute(delete(SlotModel).where(SlotModel.id == slot_id))
