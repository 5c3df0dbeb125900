"""
Guest Notification Type

Selects the WhatsApp template used for the guest message sent after a booking change.
"""

from enum import StrEnum


class NotificationType(StrEnum):
    RESERVATION_CONFIRMATION = 'RESERVATION_CONFIRMATION'
    WEEKDAY_BRUNCH = 'WEEKDAY_BRUNCH'
    WEEKEND_BRUNCH = 'WEEKEND_BRUNCH'
    RESERVATION_UPDATE = 'RESERVATION_UPDATE'
    RESERVATION_MOVED = 'RESERVATION_MOVED'
