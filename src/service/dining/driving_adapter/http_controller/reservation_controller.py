from collections.abc import AsyncIterator
from datetime import date
from typing import Optional

import anyio
from fastapi import APIRouter, Depends, status
from opentelemetry import trace
import orjson
from sse_starlette.sse import EventSourceResponse

from src.platform.logging.loguru_io import Logger
from src.service.dining.app.command.cancel_reservation_use_case import CancelReservationUseCase
from src.service.dining.app.command.create_reservation_use_case import CreateReservationUseCase
from src.service.dining.app.command.move_reservation_use_case import MoveReservationUseCase
from src.service.dining.app.command.update_reservation_use_case import UpdateReservationUseCase
from src.service.dining.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.dining.app.query.get_table_availability_use_case import (
    GetTableAvailabilityUseCase,
)
from src.service.dining.app.query.stream_reservation_updates_use_case import (
    StreamReservationUpdatesUseCase,
)
from src.service.dining.domain.value_object.restaurant_context import RestaurantContext
from src.service.dining.driving_adapter.http_controller.auth.role_auth import (
    get_restaurant_context,
    require_operator,
)
from src.service.dining.driving_adapter.http_controller.schema.reservation_schema import (
    ReservationCancelRequest,
    ReservationCreateRequest,
    ReservationMoveRequest,
    ReservationResponse,
    ReservationUpdateRequest,
    TableAvailabilityResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get('/availability')
@Logger.io
async def get_table_availability(
    date: date,
    slot_id: int,
    custom_start_time: Optional[str] = None,
    context: RestaurantContext = Depends(get_restaurant_context),
    use_case: GetTableAvailabilityUseCase = Depends(GetTableAvailabilityUseCase.depends),
) -> TableAvailabilityResponse:
    availability = await use_case.execute(
        restaurant_id=context.restaurant_id,
        on=date,
        slot_id=slot_id,
        custom_start_time=custom_start_time,
    )
    return TableAvailabilityResponse.from_availability(availability)


# ============================ SSE Endpoint ============================


@router.get('/stream', status_code=status.HTTP_200_OK)
async def stream_reservation_updates(
    context: RestaurantContext = Depends(get_restaurant_context),
    use_case: StreamReservationUpdatesUseCase = Depends(StreamReservationUpdatesUseCase.depends),
) -> EventSourceResponse:
    """
    Change events of the caller's restaurant

    Architecture: Use Case → Redis Pub/Sub (restaurant_{id}) → SSE Endpoint → Client
    """
    restaurant_id = context.restaurant_id
    Logger.base.info(f'📡 [SSE] Client subscribing to restaurant={restaurant_id}')

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        try:
            async for event in use_case.stream(restaurant_id=restaurant_id):
                yield {
                    'event': str(event.get('event_type', 'message')),
                    'data': orjson.dumps(event).decode(),
                }
        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'🔌 [SSE] Client disconnected: restaurant={restaurant_id}')
            raise

    return EventSourceResponse(event_generator())


@router.get('/{reservation_id}')
@Logger.io
async def get_reservation(
    reservation_id: int,
    context: RestaurantContext = Depends(get_restaurant_context),
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> ReservationResponse:
    result = await use_case.execute(
        restaurant_id=context.restaurant_id, reservation_id=reservation_id
    )
    return ReservationResponse.from_result(result)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation(
    request: ReservationCreateRequest,
    context: RestaurantContext = Depends(require_operator),
    use_case: CreateReservationUseCase = Depends(CreateReservationUseCase.depends),
) -> ReservationResponse:
    with tracer.start_as_current_span('controller.create_reservation') as span:
        span.set_attribute('restaurant.id', context.restaurant_id)
        span.set_attribute('slot.id', request.slot_id)

        result = await use_case.execute(
            restaurant_id=context.restaurant_id,
            table_id=request.table_id,
            slot_id=request.slot_id,
            on=request.date,
            party=request.to_party(),
            merge_table_ids=request.merge_table_ids,
            custom_start_time=request.custom_start_time,
            notification_type=request.notification_type,
        )
        return ReservationResponse.from_result(result)


@router.patch('/{reservation_id}')
@Logger.io
async def update_reservation(
    reservation_id: int,
    request: ReservationUpdateRequest,
    context: RestaurantContext = Depends(require_operator),
    use_case: UpdateReservationUseCase = Depends(UpdateReservationUseCase.depends),
) -> ReservationResponse:
    result = await use_case.execute(
        restaurant_id=context.restaurant_id,
        reservation_id=reservation_id,
        party=request.to_party(),
        add_table_ids=request.add_table_ids,
        notification_type=request.notification_type,
    )
    return ReservationResponse.from_result(result)


@router.post('/{reservation_id}/move')
@Logger.io
async def move_reservation(
    reservation_id: int,
    request: ReservationMoveRequest,
    context: RestaurantContext = Depends(require_operator),
    use_case: MoveReservationUseCase = Depends(MoveReservationUseCase.depends),
) -> ReservationResponse:
    result = await use_case.execute(
        restaurant_id=context.restaurant_id,
        reservation_id=reservation_id,
        table_ids=request.table_ids,
        on=request.date,
        slot_id=request.slot_id,
    )
    return ReservationResponse.from_result(result)


@router.post('/{reservation_id}/cancel')
@Logger.io
async def cancel_reservation(
    reservation_id: int,
    request: Optional[ReservationCancelRequest] = None,
    context: RestaurantContext = Depends(require_operator),
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> ReservationResponse:
    result = await use_case.execute(
        restaurant_id=context.restaurant_id,
        reservation_id=reservation_id,
        reason=request.reason if request else None,
    )
    return ReservationResponse.from_result(result)
