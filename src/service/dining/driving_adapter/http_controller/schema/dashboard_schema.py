from datetime import date as Date, datetime
from typing import List, Optional

from pydantic import BaseModel

from src.service.dining.domain.dashboard_summary import DashboardSummary


class DisplayReservationResponse(BaseModel):
    id: int
    reservation_ids: List[int]
    table_ids: List[int]
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


class SlotAnalyticsResponse(BaseModel):
    slot_id: int
    time: str
    bookings: int
    guests: int


class DashboardSummaryResponse(BaseModel):
    date: Date
    total_tables: int
    bookings_count: int
    guests_count: int
    reservations: List[DisplayReservationResponse]
    cancelled_reservations: List[DisplayReservationResponse]
    slot_analytics: List[SlotAnalyticsResponse]

    @classmethod
    def from_summary(cls, summary: DashboardSummary) -> 'DashboardSummaryResponse':
        return cls.model_validate(summary.to_dict())
