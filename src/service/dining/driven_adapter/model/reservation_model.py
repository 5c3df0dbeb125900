import datetime as dt
from typing import Optional

from sqlalchemy import Date, DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base
from src.service.dining.domain.enum.reservation_status import ReservationStatus


LIVE_RESERVATION_PREDICATE = text(f"status = '{ReservationStatus.BOOKED.value}'")


class ReservationModel(Base):
    __tablename__ = 'reservation'
    __table_args__ = (
        # At most one live reservation per (table, slot, day)
        Index(
            'uq_reservation_live_table_slot_date',
            'table_id',
            'slot_id',
            'date',
            unique=True,
            postgresql_where=LIVE_RESERVATION_PREDICATE,
            sqlite_where=LIVE_RESERVATION_PREDICATE,
        ),
        Index('ix_reservation_slot_date', 'slot_id', 'date'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # table_id/slot_id are plain indexed ids: cancelled history outlives deleted tables and slots
    table_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    slot_id: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String(120), nullable=False)
    contact: Mapped[str] = mapped_column(String(32), nullable=False)
    adults: Mapped[int] = mapped_column(Integer, nullable=False)
    kids: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    food_pref: Mapped[str] = mapped_column(String(20), nullable=False)
    special_req: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ReservationStatus.BOOKED.value
    )
    group_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    custom_start_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
