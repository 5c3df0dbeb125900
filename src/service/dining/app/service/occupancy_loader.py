"""Loads the rows the occupancy rules need for one restaurant day."""

from datetime import date

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.dining.app.dto.availability_dto import SlotView
from src.service.dining.domain.occupancy import compute_slot_occupancy


async def load_slot_views(
    uow: AbstractUnitOfWork, *, restaurant_id: int, on: date
) -> list[SlotView]:
    """Active slots of the day, each with its occupancy and override flags"""
    slots = await uow.slot_repo.list_active_for_date(restaurant_id=restaurant_id, on=on)
    if not slots:
        return []

    tables = await uow.table_repo.list_by_restaurant(restaurant_id=restaurant_id)
    live = await uow.reservation_query_repo.list_live_for_day(restaurant_id=restaurant_id, on=on)
    overrides = {
        o.slot_id: o
        for o in await uow.slot_override_repo.list_for_date(restaurant_id=restaurant_id, on=on)
    }
    table_ids = [t.id for t in tables if t.id is not None]

    return [
        SlotView(
            slot=slot,
            occupancy=compute_slot_occupancy(
                slot_id=slot.id,
                on=on,
                table_ids=table_ids,
                reservations=live,
                override=overrides.get(slot.id),
            ),
        )
        for slot in slots
        if slot.id is not None and slot.matches(on)
    ]
