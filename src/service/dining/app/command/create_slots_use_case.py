from datetime import date
from typing import Iterable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.service.reservation_side_effects import ReservationSideEffects
from src.service.dining.domain.entity.slot_entity import Slot, normalize_days
from src.service.dining.domain.enum.change_event_type import ChangeEventType


class CreateSlotsUseCase:
    def __init__(
        self, *, uow_factory: UnitOfWorkFactory, side_effects: ReservationSideEffects
    ) -> None:
        self.uow_factory = uow_factory
        self.side_effects = side_effects
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        side_effects: ReservationSideEffects = Depends(
            Provide[Container.reservation_side_effects]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, side_effects=side_effects)

    @Logger.io
    async def create_recurring(
        self, *, restaurant_id: int, start_time: str, end_time: str, days: Iterable[int]
    ) -> list[Slot]:
        """
        One recurring slot per selected weekday (0 = Sunday)

        Every day is validated up front, then each slot is committed on its own:
        a failure part-way keeps the slots already created.
        """
        drafts = [
            Slot.create_recurring(
                restaurant_id=restaurant_id,
                start_time=start_time,
                end_time=end_time,
                day_of_week=day,
            )
            for day in normalize_days(days)
        ]

        with self.tracer.start_as_current_span(
            'use_case.create_slots',
            attributes={'restaurant.id': restaurant_id, 'slot.count': len(drafts)},
        ):
            created: list[Slot] = []
            for draft in drafts:
                async with self.uow_factory() as uow:
                    created.append(await uow.slot_repo.create(slot=draft))
                    await uow.commit()

            Logger.base.info(
                f'🕒 [CREATE-SLOTS] restaurant={restaurant_id} {start_time}-{end_time} '
                f'days={[s.day_of_week for s in created]}'
            )
            self.side_effects.publish_change(
                restaurant_id=restaurant_id, event_type=ChangeEventType.SLOT_AVAILABILITY_UPDATE
            )
            return created

    @Logger.io
    async def create_dated(
        self, *, restaurant_id: int, start_time: str, end_time: str, specific_date: date
    ) -> Slot:
        slot = Slot.create_dated(
            restaurant_id=restaurant_id,
            start_time=start_time,
            end_time=end_time,
            specific_date=specific_date,
        )
        with self.tracer.start_as_current_span(
            'use_case.create_dated_slot',
            attributes={'restaurant.id': restaurant_id, 'slot.date': specific_date.isoformat()},
        ):
            async with self.uow_factory() as uow:
                slot = await uow.slot_repo.create(slot=slot)
                await uow.commit()

            Logger.base.info(
                f'🕒 [CREATE-SLOTS] restaurant={restaurant_id} {start_time}-{end_time} on {specific_date}'
            )
            self.side_effects.publish_change(
                restaurant_id=restaurant_id,
                event_type=ChangeEventType.SLOT_AVAILABILITY_UPDATE,
                on=specific_date,
                slot_id=slot.id,
            )
            return slot
