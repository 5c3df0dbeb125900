from abc import ABC, abstractmethod
from typing import Iterable, Optional

from src.service.dining.domain.entity.table_entity import Table


class ITableRepo(ABC):
    """Read side used by the engine plus the small admin surface of the table registry."""

    @abstractmethod
    async def list_by_restaurant(self, *, restaurant_id: int) -> list[Table]:
        """
        Returns:
            Tables in natural table_number order
        """
        pass

    @abstractmethod
    async def get_many(self, *, restaurant_id: int, table_ids: Iterable[int]) -> list[Table]:
        """
        Tables among `table_ids` that belong to the restaurant

        Returns:
            Found tables (missing or foreign ids are simply absent)
        """
        pass

    @abstractmethod
    async def get(self, *, restaurant_id: int, table_id: int) -> Optional[Table]:
        pass

    @abstractmethod
    async def get_by_number(self, *, restaurant_id: int, table_number: str) -> Optional[Table]:
        pass

    @abstractmethod
    async def create(self, *, table: Table) -> Table:
        pass

    @abstractmethod
    async def update(self, *, table: Table) -> Table:
        pass

    @abstractmethod
    async def delete(self, *, table_id: int) -> None:
        pass
