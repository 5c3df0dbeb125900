import datetime as dt

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class SlotAvailabilityModel(Base):
    __tablename__ = 'slot_availability'
    __table_args__ = (UniqueConstraint('slot_id', 'date', name='uq_slot_availability_slot_date'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slot_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('slot.id', ondelete='CASCADE'), nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    is_slot_disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_indoor_disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_outdoor_disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
