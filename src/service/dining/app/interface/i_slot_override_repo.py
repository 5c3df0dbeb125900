from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from src.service.dining.domain.entity.slot_availability_override_entity import (
    SlotAvailabilityOverride,
)


class ISlotOverrideRepo(ABC):
    @abstractmethod
    async def get(self, *, slot_id: int, on: date) -> Optional[SlotAvailabilityOverride]:
        pass

    @abstractmethod
    async def list_for_date(
        self, *, restaurant_id: int, on: date
    ) -> list[SlotAvailabilityOverride]:
        """Overrides of every slot of the restaurant on that day"""
        pass

    @abstractmethod
    async def upsert(self, *, override: SlotAvailabilityOverride) -> SlotAvailabilityOverride:
        """
        Insert or update keyed by (slot_id, date)

        Args:
            override: Desired flags

        Returns:
            Stored override with its id
        """
        pass
