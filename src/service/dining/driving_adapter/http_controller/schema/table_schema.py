from typing import Optional

from pydantic import BaseModel

from src.service.dining.domain.entity.table_entity import Table


class TableCreateRequest(BaseModel):
    table_number: str
    capacity: int

    model_config = {'json_schema_extra': {'example': {'table_number': 'T1', 'capacity': 4}}}


class TableUpdateRequest(BaseModel):
    table_number: Optional[str] = None
    capacity: Optional[int] = None


class TableResponse(BaseModel):
    id: int
    table_number: str
    capacity: int

    @classmethod
    def from_table(cls, table: Table) -> 'TableResponse':
        return cls(id=table.id or 0, table_number=table.table_number, capacity=table.capacity)
