from datetime import date

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.dining.app.query.get_dashboard_summary_use_case import (
    GetDashboardSummaryUseCase,
)
from src.service.dining.domain.value_object.restaurant_context import RestaurantContext
from src.service.dining.driving_adapter.http_controller.auth.role_auth import (
    get_restaurant_context,
)
from src.service.dining.driving_adapter.http_controller.schema.dashboard_schema import (
    DashboardSummaryResponse,
)


router = APIRouter()


@router.get('/summary')
@Logger.io
async def get_dashboard_summary(
    date: date,
    context: RestaurantContext = Depends(get_restaurant_context),
    use_case: GetDashboardSummaryUseCase = Depends(GetDashboardSummaryUseCase.depends),
) -> DashboardSummaryResponse:
    summary = await use_case.execute(restaurant_id=context.restaurant_id, on=date)
    return DashboardSummaryResponse.from_summary(summary)
