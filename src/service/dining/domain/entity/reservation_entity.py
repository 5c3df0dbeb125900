from datetime import date, datetime, timezone
from typing import Optional

import attrs

from src.service.dining.domain.enum.reservation_status import ReservationStatus
from src.service.dining.domain.value_object.party_details import PartyDetails


@attrs.define
class Reservation:
    """
    One table held by one party for one slot on one calendar day.

    Rows sharing a non-null `group_id` form a multi-table reservation.
    """

    table_id: int
    slot_id: int
    date: date
    party: PartyDetails
    status: ReservationStatus = ReservationStatus.BOOKED
    group_id: Optional[str] = None
    custom_start_time: Optional[str] = None
    cancellation_reason: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def book(
        cls,
        *,
        table_id: int,
        slot_id: int,
        on: date,
        party: PartyDetails,
        group_id: Optional[str] = None,
        custom_start_time: Optional[str] = None,
    ) -> 'Reservation':
        now = datetime.now(timezone.utc)
        return cls(
            table_id=table_id,
            slot_id=slot_id,
            date=on,
            party=party,
            group_id=group_id,
            custom_start_time=custom_start_time,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_live(self) -> bool:
        return self.status == ReservationStatus.BOOKED

    @property
    def booking_key(self) -> str:
        """Identity of the logical booking: one per group, one per standalone row."""
        return self.group_id or f'RES-{self.id}'

    def cancel(self, *, reason: Optional[str] = None) -> 'Reservation':
        return attrs.evolve(
            self,
            status=ReservationStatus.CANCELLED,
            cancellation_reason=reason,
            updated_at=datetime.now(timezone.utc),
        )
