from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.dining.app.command.create_slots_use_case import CreateSlotsUseCase
from src.service.dining.app.command.delete_slot_use_case import DeleteSlotUseCase
from src.service.dining.app.command.upsert_slot_override_use_case import (
    UpsertSlotOverrideUseCase,
)
from src.service.dining.app.query.list_bookable_slots_use_case import ListBookableSlotsUseCase
from src.service.dining.app.query.list_slot_overrides_use_case import ListSlotOverridesUseCase
from src.service.dining.app.query.list_slots_use_case import ListSlotsUseCase
from src.service.dining.domain.value_object.restaurant_context import RestaurantContext
from src.service.dining.driving_adapter.http_controller.auth.role_auth import (
    get_restaurant_context,
    require_operator,
)
from src.service.dining.driving_adapter.http_controller.schema.slot_schema import (
    PublicSlotResponse,
    SlotCreateRequest,
    SlotOverrideRequest,
    SlotOverrideResponse,
    SlotResponse,
)


router = APIRouter()
availability_router = APIRouter()


@router.get('')
@Logger.io
async def list_slots(
    date: Optional[date] = None,
    all: bool = False,
    context: RestaurantContext = Depends(get_restaurant_context),
    use_case: ListSlotsUseCase = Depends(ListSlotsUseCase.depends),
) -> List[SlotResponse]:
    views = await use_case.execute(restaurant_id=context.restaurant_id, on=date, all_slots=all)
    return [SlotResponse.from_view(v) for v in views]


@router.get('/public')
@Logger.io
async def list_public_slots(
    restaurant_id: int = Query(...),
    date: date = Query(...),
    use_case: ListBookableSlotsUseCase = Depends(ListBookableSlotsUseCase.depends),
) -> List[PublicSlotResponse]:
    """Bookable slots for guests: no auth, disabled and full slots are hidden"""
    views = await use_case.execute(restaurant_id=restaurant_id, on=date)
    return [PublicSlotResponse.from_view(v) for v in views]


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_slots(
    request: SlotCreateRequest,
    context: RestaurantContext = Depends(require_operator),
    use_case: CreateSlotsUseCase = Depends(CreateSlotsUseCase.depends),
) -> List[SlotResponse]:
    if request.date is not None:
        slot = await use_case.create_dated(
            restaurant_id=context.restaurant_id,
            start_time=request.start_time,
            end_time=request.end_time,
            specific_date=request.date,
        )
        return [SlotResponse.from_slot(slot)]

    slots = await use_case.create_recurring(
        restaurant_id=context.restaurant_id,
        start_time=request.start_time,
        end_time=request.end_time,
        days=request.days,
    )
    return [SlotResponse.from_slot(s) for s in slots]


@router.delete('/{slot_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_slot(
    slot_id: int,
    context: RestaurantContext = Depends(require_operator),
    use_case: DeleteSlotUseCase = Depends(DeleteSlotUseCase.depends),
) -> None:
    await use_case.execute(restaurant_id=context.restaurant_id, slot_id=slot_id)


# ============================ Slot Availability ============================


@availability_router.get('')
@Logger.io
async def list_slot_overrides(
    date: date,
    context: RestaurantContext = Depends(get_restaurant_context),
    use_case: ListSlotOverridesUseCase = Depends(ListSlotOverridesUseCase.depends),
) -> List[SlotOverrideResponse]:
    overrides = await use_case.execute(restaurant_id=context.restaurant_id, on=date)
    return [SlotOverrideResponse.from_override(o) for o in overrides]


@availability_router.post('')
@Logger.io
async def upsert_slot_override(
    request: SlotOverrideRequest,
    context: RestaurantContext = Depends(require_operator),
    use_case: UpsertSlotOverrideUseCase = Depends(UpsertSlotOverrideUseCase.depends),
) -> SlotOverrideResponse:
    override = await use_case.execute(
        restaurant_id=context.restaurant_id,
        slot_id=request.slot_id,
        on=request.date,
        is_slot_disabled=request.is_slot_disabled,
        is_indoor_disabled=request.is_indoor_disabled,
        is_outdoor_disabled=request.is_outdoor_disabled,
    )
    return SlotOverrideResponse.from_override(override)
