from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import execute_or_conflict, flush_or_conflict
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_reservation_command_repo import (
    IReservationCommandRepo,
)
from src.service.dining.domain.entity.reservation_entity import Reservation
from src.service.dining.domain.enum.reservation_status import ReservationStatus
from src.service.dining.domain.value_object.party_details import PartyDetails
from src.service.dining.driven_adapter.model.reservation_model import ReservationModel


TABLE_ALREADY_BOOKED = 'Table is already booked for this slot'


class ReservationCommandRepoImpl(IReservationCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_model(reservation: Reservation) -> ReservationModel:
        now = datetime.now(timezone.utc)
        party = reservation.party
        return ReservationModel(
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
            created_at=reservation.created_at or now,
            updated_at=reservation.updated_at or now,
        )

    @Logger.io
    async def create_many(self, *, reservations: list[Reservation]) -> list[Reservation]:
        models = [self._to_model(r) for r in reservations]
        self.session.add_all(models)
        await flush_or_conflict(self.session, message=TABLE_ALREADY_BOOKED)
        for reservation, model in zip(reservations, models, strict=True):
            reservation.id = model.id
            reservation.created_at = model.created_at
            reservation.updated_at = model.updated_at
        return reservations

    @Logger.io
    async def update_party(self, *, reservation_ids: Iterable[int], party: PartyDetails) -> None:
        await self.session.execute(
            update(ReservationModel)
            .where(ReservationModel.id.in_(list(reservation_ids)))
            .values(
                customer_name=party.customer_name,
                contact=party.contact,
                adults=party.adults,
                kids=party.kids,
                food_pref=str(party.food_pref),
                special_req=party.special_req,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def assign_group(
        self, *, reservation_ids: Iterable[int], group_id: Optional[str]
    ) -> None:
        await self.session.execute(
            update(ReservationModel)
            .where(ReservationModel.id.in_(list(reservation_ids)))
            .values(group_id=group_id, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def relocate(
        self,
        *,
        reservation_id: int,
        table_id: int,
        slot_id: int,
        on: date,
        group_id: Optional[str],
        custom_start_time: Optional[str],
    ) -> None:
        await execute_or_conflict(
            self.session,
            update(ReservationModel)
            .where(ReservationModel.id == reservation_id)
            .values(
                table_id=table_id,
                slot_id=slot_id,
                date=on,
                group_id=group_id,
                custom_start_time=custom_start_time,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False),
            message=TABLE_ALREADY_BOOKED,
        )

    @Logger.io
    async def cancel(self, *, reservation_ids: Iterable[int], reason: Optional[str]) -> None:
        await self.session.execute(
            update(ReservationModel)
            .where(
                ReservationModel.id.in_(list(reservation_ids)),
                ReservationModel.status == ReservationStatus.BOOKED.value,
            )
            .values(
                status=ReservationStatus.CANCELLED.value,
                cancellation_reason=reason,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
