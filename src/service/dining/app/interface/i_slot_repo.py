from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from src.service.dining.domain.entity.slot_entity import Slot


class ISlotRepo(ABC):
    @abstractmethod
    async def list_active(self, *, restaurant_id: int) -> list[Slot]:
        """
        Every active slot of the restaurant

        Returns:
            Slots ordered by (day_of_week, start_time), dated slots last
        """
        pass

    @abstractmethod
    async def list_active_for_date(self, *, restaurant_id: int, on: date) -> list[Slot]:
        """
        Active slots visible on a calendar day

        Args:
            restaurant_id: Restaurant ID
            on: Calendar day, matched against day_of_week OR specific_date

        Returns:
            Slots ordered by start_time
        """
        pass

    @abstractmethod
    async def get(self, *, restaurant_id: int, slot_id: int) -> Optional[Slot]:
        """Slot owned by the restaurant, None when missing or foreign"""
        pass

    @abstractmethod
    async def create(self, *, slot: Slot) -> Slot:
        pass

    @abstractmethod
    async def delete(self, *, slot_id: int) -> None:
        pass
