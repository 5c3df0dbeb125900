"""
Reservation Command Repository Interface

Writes run inside the caller's Unit of Work; nothing here commits.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.value_object.party_details import PartyDetails


class IReservationCommandRepo(ABC):
    @abstractmethod
    async def create_many(self, *, reservations: list[Reservation]) -> list[Reservation]:
        """
        Insert one row per reservation

        Args:
            reservations: Rows to insert (ids unset)

        Returns:
            Inserted rows with ids

        Raises:
            ConflictError: A live row already holds one of the (table, slot, date) triples
        """
        pass

    @abstractmethod
    async def update_party(self, *, reservation_ids: Iterable[int], party: PartyDetails) -> None:
        pass

    @abstractmethod
    async def assign_group(self, *, reservation_ids: Iterable[int], group_id: Optional[str]) -> None:
        pass

    @abstractmethod
    async def relocate(
        self,
        *,
        reservation_id: int,
        table_id: int,
        slot_id: int,
        on: date,
        group_id: Optional[str],
        custom_start_time: Optional[str],
    ) -> None:
        """
        Move one row in place

        Raises:
            ConflictError: The destination triple is already held by a live row
        """
        pass

    @abstractmethod
    async def cancel(self, *, reservation_ids: Iterable[int], reason: Optional[str]) -> None:
        """Set CANCELLED (and the reason) on rows that are still BOOKED"""
        pass
