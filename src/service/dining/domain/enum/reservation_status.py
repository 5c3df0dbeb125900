from enum import StrEnum


class ReservationStatus(StrEnum):
    """Reservation lifecycle: BOOKED → CANCELLED (terminal)"""

    BOOKED = 'BOOKED'
    CANCELLED = 'CANCELLED'
