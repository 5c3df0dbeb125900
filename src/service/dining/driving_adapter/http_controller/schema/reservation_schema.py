from datetime import date as Date, datetime
from typing import List, Optional

from pydantic import BaseModel

from src.service.dining.app.dto.availability_dto import TableAvailability
from src.service.dining.app.dto.reservation_dto import ReservationResult
from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.enum.food_preference import FoodPreference
from src.service.dining.domain.enum.notification_type import NotificationType
from src.service.dining.domain.value_object.custom_time_window import CustomTimeWindow
from src.service.dining.domain.value_object.party_details import PartyDetails
from src.service.dining.driving_adapter.http_controller.schema.slot_schema import SlotResponse


class PartyFields(BaseModel):
    customer_name: str
    contact: str
    adults: int
    kids: int = 0
    food_pref: FoodPreference = FoodPreference.REGULAR
    special_req: Optional[str] = None

    def to_party(self) -> PartyDetails:
        return PartyDetails.create(
            customer_name=self.customer_name,
            contact=self.contact,
            adults=self.adults,
            kids=self.kids,
            food_pref=self.food_pref,
            special_req=self.special_req,
        )


class ReservationCreateRequest(PartyFields):
    table_id: int
    slot_id: int
    date: Date
    merge_table_ids: List[int] = []
    custom_start_time: Optional[str] = None
    notification_type: Optional[NotificationType] = None

    model_config = {
        'json_schema_extra': {
            'example': {
                'table_id': 1,
                'slot_id': 3,
                'date': '2025-06-14',
                'customer_name': 'Asha Patel',
                'contact': '9876543210',
                'adults': 4,
                'kids': 2,
                'food_pref': 'Jain',
                'merge_table_ids': [2],
            }
        }
    }


class ReservationUpdateRequest(PartyFields):
    add_table_ids: List[int] = []
    notification_type: Optional[NotificationType] = None


class ReservationMoveRequest(BaseModel):
    table_ids: List[int]
    date: Optional[Date] = None
    slot_id: Optional[int] = None

    model_config = {
        'json_schema_extra': {'example': {'table_ids': [5, 6], 'date': '2025-06-15', 'slot_id': 4}}
    }


class ReservationCancelRequest(BaseModel):
    reason: Optional[str] = None


class CustomWindowResponse(BaseModel):
    start_time: str
    end_time: str

    @classmethod
    def from_window(cls, window: Optional[CustomTimeWindow]) -> Optional['CustomWindowResponse']:
        if window is None:
            return None
        return cls(start_time=window.start_time, end_time=window.end_time)


class ReservationRowResponse(BaseModel):
    id: int
    table_id: int
    slot_id: int
    date: Date
    customer_name: str
    contact: str
    adults: int
    kids: int
    food_pref: str
    special_req: Optional[str] = None
    status: str
    group_id: Optional[str] = None
    custom_start_time: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> 'ReservationRowResponse':
        party = reservation.party
        return cls(
            id=reservation.id or 0,
            table_id=reservation.table_id,
            slot_id=reservation.slot_id,
            date=reservation.date,
            customer_name=party.customer_name,
            contact=party.contact,
            adults=party.adults,
            kids=party.kids,
            food_pref=str(party.food_pref),
            special_req=party.special_req,
            status=str(reservation.status),
            group_id=reservation.group_id,
            custom_start_time=reservation.custom_start_time,
            cancellation_reason=reservation.cancellation_reason,
            created_at=reservation.created_at,
        )


class ReservationResponse(BaseModel):
    id: int
    group_id: Optional[str] = None
    status: str
    table_numbers: List[str]
    total_capacity: int
    party_size: int
    exceeds_capacity: bool
    custom_window: Optional[CustomWindowResponse] = None
    reservations: List[ReservationRowResponse]

    @classmethod
    def from_result(cls, result: ReservationResult) -> 'ReservationResponse':
        lead = result.lead
        return cls(
            id=lead.id or 0,
            group_id=lead.group_id,
            status=str(lead.status),
            table_numbers=result.table_numbers,
            total_capacity=result.total_capacity,
            party_size=result.party_size,
            exceeds_capacity=result.exceeds_capacity,
            custom_window=CustomWindowResponse.from_window(result.custom_window),
            reservations=[
                ReservationRowResponse.from_reservation(r)
                for r in sorted(result.reservations, key=lambda r: r.id or 0)
            ],
        )


class TableStateResponse(BaseModel):
    id: int
    table_number: str
    capacity: int
    is_occupied: bool
    reservation: Optional[ReservationRowResponse] = None


class TableAvailabilityResponse(BaseModel):
    slot: SlotResponse
    date: Date
    total_tables: int
    occupied_count: int
    is_slot_disabled: bool
    is_indoor_disabled: bool
    is_outdoor_disabled: bool
    is_auto_disabled: bool
    custom_window: Optional[CustomWindowResponse] = None
    tables: List[TableStateResponse]

    @classmethod
    def from_availability(cls, availability: TableAvailability) -> 'TableAvailabilityResponse':
        occupancy = availability.occupancy
        return cls(
            slot=SlotResponse.from_slot(
                availability.slot,
                reserved_count=occupancy.reserved_count,
                is_auto_disabled=occupancy.is_auto_disabled,
            ),
            date=occupancy.date,
            total_tables=occupancy.total_tables,
            occupied_count=occupancy.occupied_count,
            is_slot_disabled=occupancy.is_slot_disabled,
            is_indoor_disabled=occupancy.is_indoor_disabled,
            is_outdoor_disabled=occupancy.is_outdoor_disabled,
            is_auto_disabled=occupancy.is_auto_disabled,
            custom_window=CustomWindowResponse.from_window(availability.custom_window),
            tables=[
                TableStateResponse(
                    id=state.table.id or 0,
                    table_number=state.table.table_number,
                    capacity=state.table.capacity,
                    is_occupied=state.is_occupied,
                    reservation=ReservationRowResponse.from_reservation(state.reservation)
                    if state.reservation
                    else None,
                )
                for state in availability.tables
            ],
        )
