"""Slot and table availability DTOs."""

from typing import Optional

import attrs

from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.entity.slot_entity import Slot
from src.service.dining.domain.entity.table_entity import Table
from src.service.dining.domain.occupancy import SlotOccupancy
from src.service.dining.domain.value_object.custom_time_window import CustomTimeWindow


@attrs.define
class SlotView:
    """A slot, with its occupancy when listed for a specific date"""

    slot: Slot
    occupancy: Optional[SlotOccupancy] = None

    @property
    def reserved_count(self) -> int:
        return self.occupancy.reserved_count if self.occupancy else 0

    @property
    def is_auto_disabled(self) -> bool:
        return self.occupancy.is_auto_disabled if self.occupancy else False


@attrs.define
class TableState:
    table: Table
    reservation: Optional[Reservation] = None

    @property
    def is_occupied(self) -> bool:
        return self.reservation is not None


@attrs.define
class TableAvailability:
    slot: Slot
    occupancy: SlotOccupancy
    tables: list[TableState]
    custom_window: Optional[CustomTimeWindow] = None
