from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from src.service.dining.domain.dashboard_summary import ReservationRow
from src.service.dining.domain.entity.reservation_entity import Reservation


class IReservationQueryRepo(ABC):
    @abstractmethod
    async def get(self, *, restaurant_id: int, reservation_id: int) -> Optional[Reservation]:
        """
        Reservation whose table belongs to the restaurant

        Returns:
            Reservation or None when missing or foreign
        """
        pass

    @abstractmethod
    async def list_group(self, *, group_id: str) -> list[Reservation]:
        """Every row sharing the group id, any status"""
        pass

    @abstractmethod
    async def list_live_for_slot(
        self, *, restaurant_id: int, slot_id: int, on: date
    ) -> list[Reservation]:
        """BOOKED rows of the restaurant for (slot, day), read fresh for conflict checks"""
        pass

    @abstractmethod
    async def list_live_for_day(self, *, restaurant_id: int, on: date) -> list[Reservation]:
        """BOOKED rows of the restaurant for the whole day (all slots)"""
        pass

    @abstractmethod
    async def list_rows_for_day(self, *, restaurant_id: int, on: date) -> list[ReservationRow]:
        """
        Rows of the day joined with table number and slot window, any status

        Returns:
            Flat rows, one per reserved table
        """
        pass

    @abstractmethod
    async def has_live_for_table(self, *, table_id: int) -> bool:
        pass
