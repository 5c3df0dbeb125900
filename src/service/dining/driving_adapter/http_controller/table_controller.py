from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.dining.app.command.manage_table_use_case import ManageTableUseCase
from src.service.dining.app.query.list_tables_use_case import ListTablesUseCase
from src.service.dining.domain.value_object.restaurant_context import RestaurantContext
from src.service.dining.driving_adapter.http_controller.auth.role_auth import (
    get_restaurant_context,
    require_operator,
)
from src.service.dining.driving_adapter.http_controller.schema.table_schema import (
    TableCreateRequest,
    TableResponse,
    TableUpdateRequest,
)


router = APIRouter()


@router.get('')
@Logger.io
async def list_tables(
    context: RestaurantContext = Depends(get_restaurant_context),
    use_case: ListTablesUseCase = Depends(ListTablesUseCase.depends),
) -> List[TableResponse]:
    tables = await use_case.execute(restaurant_id=context.restaurant_id)
    return [TableResponse.from_table(t) for t in tables]


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_table(
    request: TableCreateRequest,
    context: RestaurantContext = Depends(require_operator),
    use_case: ManageTableUseCase = Depends(ManageTableUseCase.depends),
) -> TableResponse:
    table = await use_case.create(
        restaurant_id=context.restaurant_id,
        table_number=request.table_number,
        capacity=request.capacity,
    )
    return TableResponse.from_table(table)


@router.patch('/{table_id}')
@Logger.io
async def update_table(
    table_id: int,
    request: TableUpdateRequest,
    context: RestaurantContext = Depends(require_operator),
    use_case: ManageTableUseCase = Depends(ManageTableUseCase.depends),
) -> TableResponse:
    table = await use_case.update(
        restaurant_id=context.restaurant_id,
        table_id=table_id,
        table_number=request.table_number,
        capacity=request.capacity,
    )
    return TableResponse.from_table(table)


@router.delete('/{table_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_table(
    table_id: int,
    context: RestaurantContext = Depends(require_operator),
    use_case: ManageTableUseCase = Depends(ManageTableUseCase.depends),
) -> None:
    await use_case.delete(restaurant_id=context.restaurant_id, table_id=table_id)
