from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import flush_or_conflict
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_slot_override_repo import ISlotOverrideRepo
from src.service.dining.domain.entity.slot_availability_override_entity import (
    SlotAvailabilityOverride,
)
from src.service.dining.driven_adapter.model.slot_availability_model import (
    SlotAvailabilityModel,
)
from src.service.dining.driven_adapter.model.slot_model import SlotModel


class SlotOverrideRepoImpl(ISlotOverrideRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: SlotAvailabilityModel) -> SlotAvailabilityOverride:
        return SlotAvailabilityOverride(
            id=model.id,
            slot_id=model.slot_id,
            date=model.date,
            is_slot_disabled=model.is_slot_disabled,
            is_indoor_disabled=model.is_indoor_disabled,
            is_outdoor_disabled=model.is_outdoor_disabled,
        )

    async def _get_model(self, *, slot_id: int, on: date) -> Optional[SlotAvailabilityModel]:
        result = await self.session.execute(
            select(SlotAvailabilityModel).where(
                SlotAvailabilityModel.slot_id == slot_id, SlotAvailabilityModel.date == on
            )
        )
        return result.scalar_one_or_none()

    @Logger.io
    async def get(self, *, slot_id: int, on: date) -> Optional[SlotAvailabilityOverride]:
        model = await self._get_model(slot_id=slot_id, on=on)
        return self._to_entity(model) if model else None

    @Logger.io
    async def list_for_date(
        self, *, restaurant_id: int, on: date
    ) -> list[SlotAvailabilityOverride]:
        result = await self.session.execute(
            select(SlotAvailabilityModel)
            .join(SlotModel, SlotModel.id == SlotAvailabilityModel.slot_id)
            .where(SlotModel.restaurant_id == restaurant_id, SlotAvailabilityModel.date == on)
            .order_by(SlotAvailabilityModel.slot_id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def upsert(self, *, override: SlotAvailabilityOverride) -> SlotAvailabilityOverride:
        model = await self._get_model(slot_id=override.slot_id, on=override.date)
        if model is None:
            model = SlotAvailabilityModel(slot_id=override.slot_id, date=override.date)
            self.session.add(model)
        model.is_slot_disabled = override.is_slot_disabled
        model.is_indoor_disabled = override.is_indoor_disabled
        model.is_outdoor_disabled = override.is_outdoor_disabled
        await flush_or_conflict(
            self.session, message='Slot availability was changed concurrently, retry'
        )
        return self._to_entity(model)
