"""
Dashboard summary

Flat reservation rows (one per table) are folded into display rows (one per
booking). A multi-table group becomes a single entry with its table numbers
joined by "+", and its guests are counted once, not once per table.
"""

from datetime import date, datetime
from typing import Any, Iterable, Optional

import attrs

from src.service.dining.domain.entity.table_entity import table_number_sort_key
from src.service.dining.domain.enum.reservation_status import ReservationStatus
from src.service.dining.domain.value_object.wall_clock import format_12h


@attrs.frozen
class ReservationRow:
    """One reservation row joined with its table number and slot window."""

    reservation_id: int
    table_id: int
    table_number: str
    slot_id: int
    slot_start_time: str
    slot_end_time: str
    date: date
    customer_name: str
    contact: str
    adults: int
    kids: int
    food_pref: str
    status: ReservationStatus
    group_id: Optional[str] = None
    special_req: Optional[str] = None
    custom_start_time: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def booking_key(self) -> str:
        return self.group_id or f'RES-{self.reservation_id}'


@attrs.frozen
class DisplayReservation:
    id: int
    reservation_ids: list[int]
    table_ids: list[int]
    table_number: str
    slot_id: int
    slot_time: str
    customer_name: str
    contact: str
    adults: int
    kids: int
    guests: int
    food_pref: str
    status: str
    group_id: Optional[str] = None
    special_req: Optional[str] = None
    custom_start_time: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'DisplayReservation':
        created_at = data.get('created_at')
        return cls(
            **{
                **data,
                'created_at': datetime.fromisoformat(created_at) if created_at else None,
            }
        )


@attrs.frozen
class SlotAnalytics:
    slot_id: int
    time: str
    bookings: int
    guests: int


@attrs.frozen
class DashboardSummary:
    date: date
    total_tables: int
    bookings_count: int
    guests_count: int
    reservations: list[DisplayReservation]
    cancelled_reservations: list[DisplayReservation] = attrs.field(factory=list)
    slot_analytics: list[SlotAnalytics] = attrs.field(factory=list)

    def to_dict(self) -> dict[str, Any]:
        return attrs.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'DashboardSummary':
        return cls(
            date=date.fromisoformat(data['date']),
            total_tables=data['total_tables'],
            bookings_count=data['bookings_count'],
            guests_count=data['guests_count'],
            reservations=[DisplayReservation.from_dict(r) for r in data['reservations']],
            cancelled_reservations=[
                DisplayReservation.from_dict(r) for r in data.get('cancelled_reservations', [])
            ],
            slot_analytics=[SlotAnalytics(**s) for s in data.get('slot_analytics', [])],
        )


def _row_order(row: ReservationRow) -> tuple:
    created = row.created_at.timestamp() if row.created_at else 0.0
    return (row.slot_start_time, created, row.reservation_id)


def _slot_time(row: ReservationRow) -> str:
    # Rows of a deleted slot keep their slot_id but have no window to show
    if not row.slot_start_time:
        return ''
    return f'{format_12h(row.slot_start_time)} - {format_12h(row.slot_end_time)}'


def group_display_rows(rows: Iterable[ReservationRow]) -> list[DisplayReservation]:
    """Collapse rows sharing a booking key into one display entry, ordered by slot then creation."""
    grouped: dict[str, list[ReservationRow]] = {}
    for row in sorted(rows, key=_row_order):
        grouped.setdefault(row.booking_key, []).append(row)

    display: list[DisplayReservation] = []
    for members in grouped.values():
        lead = members[0]
        by_table = sorted(members, key=lambda r: table_number_sort_key(r.table_number))
        display.append(
            DisplayReservation(
                id=min(r.reservation_id for r in members),
                reservation_ids=sorted(r.reservation_id for r in members),
                table_ids=[r.table_id for r in by_table],
                table_number='+'.join(r.table_number for r in by_table),
                slot_id=lead.slot_id,
                slot_time=_slot_time(lead),
                customer_name=lead.customer_name,
                contact=lead.contact,
                adults=lead.adults,
                kids=lead.kids,
                guests=lead.adults + lead.kids,
                food_pref=lead.food_pref,
                status=str(lead.status),
                group_id=lead.group_id,
                special_req=lead.special_req,
                custom_start_time=lead.custom_start_time,
                cancellation_reason=lead.cancellation_reason,
                created_at=lead.created_at,
            )
        )
    return display


def _slot_analytics(live: list[DisplayReservation]) -> list[SlotAnalytics]:
    per_slot: dict[int, SlotAnalytics] = {}
    for entry in live:
        current = per_slot.get(entry.slot_id)
        per_slot[entry.slot_id] = SlotAnalytics(
            slot_id=entry.slot_id,
            time=entry.slot_time,
            bookings=(current.bookings if current else 0) + 1,
            guests=(current.guests if current else 0) + entry.guests,
        )
    return list(per_slot.values())


def build_dashboard_summary(
    *, on: date, total_tables: int, rows: Iterable[ReservationRow]
) -> DashboardSummary:
    rows = [row for row in rows if row.date == on]
    live = group_display_rows(r for r in rows if r.status == ReservationStatus.BOOKED)
    cancelled = group_display_rows(r for r in rows if r.status == ReservationStatus.CANCELLED)
    return DashboardSummary(
        date=on,
        total_tables=total_tables,
        bookings_count=len(live),
        guests_count=sum(entry.guests for entry in live),
        reservations=live,
        cancelled_reservations=cancelled,
        slot_analytics=_slot_analytics(live),
    )
