from enum import StrEnum


class ChangeEventType(StrEnum):
    """Event names pushed to restaurant channels"""

    RESERVATION_UPDATE = 'reservation:update'
    SLOT_AVAILABILITY_UPDATE = 'slot-availability:update'
    TABLE_UPDATE = 'table:update'
