from datetime import date as Date
from typing import List, Optional

from pydantic import BaseModel, model_validator

from src.service.dining.app.dto.availability_dto import SlotView
from src.service.dining.domain.entity.slot_availability_override_entity import (
    SlotAvailabilityOverride,
)
from src.service.dining.domain.entity.slot_entity import Slot


class SlotCreateRequest(BaseModel):
    start_time: str
    end_time: str
    days: List[int] = []  # recurring weekdays, 0 = Sunday
    date: Optional[Date] = None  # one-off slot instead of days

    @model_validator(mode='after')
    def check_days_or_date(self) -> 'SlotCreateRequest':
        if self.date is not None and self.days:
            raise ValueError('Provide either days or date, not both')
        return self

    model_config = {
        'json_schema_extra': {
            'examples': [
                {'start_time': '19:00', 'end_time': '20:30', 'days': [5, 6]},
                {'start_time': '12:00', 'end_time': '15:00', 'date': '2025-12-25'},
            ]
        }
    }


class SlotResponse(BaseModel):
    id: int
    start_time: str
    end_time: str
    time: str
    day_of_week: Optional[int] = None
    specific_date: Optional[Date] = None
    is_active: bool
    reserved_count: int = 0
    is_auto_disabled: bool = False

    @classmethod
    def from_slot(cls, slot: Slot, *, reserved_count: int = 0, is_auto_disabled: bool = False):
        return cls(
            id=slot.id or 0,
            start_time=slot.start_time,
            end_time=slot.end_time,
            time=slot.display_time,
            day_of_week=slot.day_of_week,
            specific_date=slot.specific_date,
            is_active=slot.is_active,
            reserved_count=reserved_count,
            is_auto_disabled=is_auto_disabled,
        )

    @classmethod
    def from_view(cls, view: SlotView) -> 'SlotResponse':
        return cls.from_slot(
            view.slot,
            reserved_count=view.reserved_count,
            is_auto_disabled=view.is_auto_disabled,
        )


class PublicSlotResponse(BaseModel):
    id: int
    start_time: str
    end_time: str
    time: str
    is_slot_disabled: bool
    is_indoor_disabled: bool
    is_outdoor_disabled: bool
    is_auto_disabled: bool

    @classmethod
    def from_view(cls, view: SlotView) -> 'PublicSlotResponse':
        assert view.occupancy is not None
        return cls(
            id=view.slot.id or 0,
            start_time=view.slot.start_time,
            end_time=view.slot.end_time,
            time=view.slot.display_time,
            is_slot_disabled=view.occupancy.is_slot_disabled,
            is_indoor_disabled=view.occupancy.is_indoor_disabled,
            is_outdoor_disabled=view.occupancy.is_outdoor_disabled,
            is_auto_disabled=view.occupancy.is_auto_disabled,
        )


class SlotOverrideRequest(BaseModel):
    slot_id: int
    date: Date
    is_slot_disabled: bool = False
    is_indoor_disabled: bool = False
    is_outdoor_disabled: bool = False

    model_config = {
        'json_schema_extra': {
            'example': {'slot_id': 1, 'date': '2025-06-14', 'is_outdoor_disabled': True}
        }
    }


class SlotOverrideResponse(BaseModel):
    id: Optional[int] = None
    slot_id: int
    date: Date
    is_slot_disabled: bool
    is_indoor_disabled: bool
    is_outdoor_disabled: bool

    @classmethod
    def from_override(cls, override: SlotAvailabilityOverride) -> 'SlotOverrideResponse':
        return cls(
            id=override.id,
            slot_id=override.slot_id,
            date=override.date,
            is_slot_disabled=override.is_slot_disabled,
            is_indoor_disabled=override.is_indoor_disabled,
            is_outdoor_disabled=override.is_outdoor_disabled,
        )
