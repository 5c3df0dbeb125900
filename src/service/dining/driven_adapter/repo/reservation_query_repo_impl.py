from datetime import date
from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.dining.domain.dashboard_summary import ReservationRow
from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.enum.food_preference import FoodPreference
from src.service.dining.domain.enum.reservation_status import ReservationStatus
from src.service.dining.domain.value_object.party_details import PartyDetails
from src.service.dining.driven_adapter.model.reservation_model import ReservationModel
from src.service.dining.driven_adapter.model.slot_model import SlotModel
from src.service.dining.driven_adapter.model.table_model import TableModel


class ReservationQueryRepoImpl(IReservationQueryRepo):
    """
    Reads always bypass the identity map (`populate_existing`): conflict checks
    inside a write transaction must see rows committed by concurrent requests.
    """

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: ReservationModel) -> Reservation:
        return Reservation(
            id=model.id,
            table_id=model.table_id,
            slot_id=model.slot_id,
            date=model.date,
            party=PartyDetails(
                customer_name=model.customer_name,
                contact=model.contact,
                adults=model.adults,
                kids=model.kids,
                food_pref=FoodPreference(model.food_pref),
                special_req=model.special_req,
            ),
            status=ReservationStatus(model.status),
            group_id=model.group_id,
            custom_start_time=model.custom_start_time,
            cancellation_reason=model.cancellation_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _owned_by(self, restaurant_id: int):
        return (
            select(ReservationModel)
            .join(TableModel, TableModel.id == ReservationModel.table_id)
            .where(TableModel.restaurant_id == restaurant_id)
            .execution_options(populate_existing=True)
        )

    @Logger.io
    async def get(self, *, restaurant_id: int, reservation_id: int) -> Optional[Reservation]:
        result = await self.session.execute(
            self._owned_by(restaurant_id).where(ReservationModel.id == reservation_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def list_group(self, *, group_id: str) -> list[Reservation]:
        result = await self.session.execute(
            select(ReservationModel)
            .where(ReservationModel.group_id == group_id)
            .order_by(ReservationModel.id)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def list_live_for_slot(
        self, *, restaurant_id: int, slot_id: int, on: date
    ) -> list[Reservation]:
        result = await self.session.execute(
            self._owned_by(restaurant_id)
            .where(
                ReservationModel.slot_id == slot_id,
                ReservationModel.date == on,
                ReservationModel.status == ReservationStatus.BOOKED.value,
            )
            .order_by(ReservationModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def list_live_for_day(self, *, restaurant_id: int, on: date) -> list[Reservation]:
        result = await self.session.execute(
            self._owned_by(restaurant_id)
            .where(
                ReservationModel.date == on,
                ReservationModel.status == ReservationStatus.BOOKED.value,
            )
            .order_by(ReservationModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def list_rows_for_day(self, *, restaurant_id: int, on: date) -> list[ReservationRow]:
        result = await self.session.execute(
            select(
                ReservationModel,
                TableModel.table_number,
                SlotModel.start_time,
                SlotModel.end_time,
            )
            .join(TableModel, TableModel.id == ReservationModel.table_id)
            .outerjoin(SlotModel, SlotModel.id == ReservationModel.slot_id)
            .where(TableModel.restaurant_id == restaurant_id, ReservationModel.date == on)
            .order_by(ReservationModel.id)
            .execution_options(populate_existing=True)
        )
        return [
            ReservationRow(
                reservation_id=model.id,
                table_id=model.table_id,
                table_number=table_number,
                slot_id=model.slot_id,
                slot_start_time=start_time or '',
                slot_end_time=end_time or '',
                date=model.date,
                customer_name=model.customer_name,
                contact=model.contact,
                adults=model.adults,
                kids=model.kids,
                food_pref=model.food_pref,
                status=ReservationStatus(model.status),
                group_id=model.group_id,
                special_req=model.special_req,
                custom_start_time=model.custom_start_time,
                cancellation_reason=model.cancellation_reason,
                created_at=model.created_at,
            )
            for model, table_number, start_time, end_time in result.all()
        ]

    @Logger.io
    async def has_live_for_table(self, *, table_id: int) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    ReservationModel.table_id == table_id,
                    ReservationModel.status == ReservationStatus.BOOKED.value,
                )
            )
        )
        return bool(result.scalar())
