"""Dining Application DTOs"""

from src.service.dining.app.dto.availability_dto import SlotView, TableAvailability, TableState
from src.service.dining.app.dto.reservation_dto import ReservationResult

__all__ = [
    'ReservationResult',
    'SlotView',
    'TableAvailability',
    'TableState',
]
