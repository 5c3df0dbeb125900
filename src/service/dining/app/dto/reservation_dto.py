"""Reservation DTOs returned by reservation use cases."""

from typing import Optional

import attrs

from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.entity.table_entity import Table, table_number_sort_key
from src.service.dining.domain.value_object.custom_time_window import CustomTimeWindow


@attrs.define
class ReservationResult:
    """
    One logical booking: every row of the group (or the single row) plus the
    tables they sit on. Capacity is advisory and only reported.
    """

    reservations: list[Reservation]
    tables: list[Table] = attrs.field(factory=list)
    custom_window: Optional[CustomTimeWindow] = None

    @property
    def lead(self) -> Reservation:
        live = [r for r in self.reservations if r.is_live]
        return min(live or self.reservations, key=lambda r: r.id or 0)

    @property
    def live_reservations(self) -> list[Reservation]:
        return [r for r in self.reservations if r.is_live]

    @property
    def table_numbers(self) -> list[str]:
        live_table_ids = {r.table_id for r in self.live_reservations}
        numbers = [t.table_number for t in self.tables if t.id in live_table_ids]
        return sorted(numbers, key=table_number_sort_key)

    @property
    def total_capacity(self) -> int:
        live_table_ids = {r.table_id for r in self.live_reservations}
        return sum(t.capacity for t in self.tables if t.id in live_table_ids)

    @property
    def party_size(self) -> int:
        return self.lead.party.party_size

    @property
    def exceeds_capacity(self) -> bool:
        return bool(self.live_reservations) and self.party_size > self.total_capacity
