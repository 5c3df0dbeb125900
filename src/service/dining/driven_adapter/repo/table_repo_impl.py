from typing import Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import flush_or_conflict
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_table_repo import ITableRepo
from src.service.dining.domain.entity.table_entity import Table, table_number_sort_key
from src.service.dining.driven_adapter.model.table_model import TableModel


class TableRepoImpl(ITableRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: TableModel) -> Table:
        return Table(
            id=model.id,
            restaurant_id=model.restaurant_id,
            table_number=model.table_number,
            capacity=model.capacity,
        )

    @Logger.io
    async def list_by_restaurant(self, *, restaurant_id: int) -> list[Table]:
        result = await self.session.execute(
            select(TableModel).where(TableModel.restaurant_id == restaurant_id)
        )
        tables = [self._to_entity(m) for m in result.scalars().all()]
        return sorted(tables, key=lambda t: table_number_sort_key(t.table_number))

    @Logger.io
    async def get_many(self, *, restaurant_id: int, table_ids: Iterable[int]) -> list[Table]:
        ids = list(table_ids)
        if not ids:
            return []
        result = await self.session.execute(
            select(TableModel).where(
                TableModel.restaurant_id == restaurant_id, TableModel.id.in_(ids)
            )
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def get(self, *, restaurant_id: int, table_id: int) -> Optional[Table]:
        result = await self.session.execute(
            select(TableModel).where(
                TableModel.restaurant_id == restaurant_id, TableModel.id == table_id
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_by_number(self, *, restaurant_id: int, table_number: str) -> Optional[Table]:
        result = await self.session.execute(
            select(TableModel).where(
                TableModel.restaurant_id == restaurant_id,
                TableModel.table_number == table_number,
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def create(self, *, table: Table) -> Table:
        model = TableModel(
            restaurant_id=table.restaurant_id,
            table_number=table.table_number,
            capacity=table.capacity,
        )
        self.session.add(model)
        await flush_or_conflict(
            self.session, message=f'Table {table.table_number} already exists'
        )
        return self._to_entity(model)

    @Logger.io
    async def update(self, *, table: Table) -> Table:
        model = await self.session.get(TableModel, table.id)
        assert model is not None
        model.table_number = table.table_number
        model.capacity = table.capacity
        await flush_or_conflict(
            self.session, message=f'Table {table.table_number} already exists'
        )
        return self._to_entity(model)

    @Logger.io
    async def delete(self, *, table_id: int) -> None:
        await self.session.execute(delete(TableModel).where(TableModel.id == table_id))
