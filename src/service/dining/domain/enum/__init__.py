"""Dining Domain Enums"""

from src.service.dining.domain.enum.change_event_type import ChangeEventType
from src.service.dining.domain.enum.food_preference import FoodPreference
from src.service.dining.domain.enum.notification_type import NotificationType
from src.service.dining.domain.enum.reservation_status import ReservationStatus
from src.service.dining.domain.enum.staff_role import StaffRole

__all__ = [
    'ChangeEventType',
    'FoodPreference',
    'NotificationType',
    'ReservationStatus',
    'StaffRole',
]
