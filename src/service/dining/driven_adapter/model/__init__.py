"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.dining.driven_adapter.model.reservation_model import ReservationModel
from src.service.dining.driven_adapter.model.slot_availability_model import (
    SlotAvailabilityModel,
)
from src.service.dining.driven_adapter.model.slot_model import SlotModel
from src.service.dining.driven_adapter.model.table_model import TableModel

__all__ = [
    'ReservationModel',
    'SlotAvailabilityModel',
    'SlotModel',
    'TableModel',
]
