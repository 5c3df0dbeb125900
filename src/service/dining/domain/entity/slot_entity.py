from datetime import date, datetime, timezone
from typing import Iterable, Optional

import attrs

from src.platform.exception.exceptions import ValidationError
from src.service.dining.domain.value_object.wall_clock import (
    day_of_week as day_of_week_of,
    format_12h,
    parse_wall_clock,
)


@attrs.define
class Slot:
    """
    Named time window of a restaurant.

    Exactly one of `day_of_week` (recurring, 0 = Sunday) or `specific_date`
    (one-off) is set.
    """

    restaurant_id: int
    start_time: str
    end_time: str
    day_of_week: Optional[int] = None
    specific_date: Optional[date] = None
    is_active: bool = True
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @staticmethod
    def _validate_window(*, start_time: str, end_time: str) -> None:
        start = parse_wall_clock(start_time, field='start_time')
        end = parse_wall_clock(end_time, field='end_time')
        if start == end:
            raise ValidationError('start_time and end_time must differ')

    @classmethod
    def create_recurring(
        cls, *, restaurant_id: int, start_time: str, end_time: str, day_of_week: int
    ) -> 'Slot':
        cls._validate_window(start_time=start_time, end_time=end_time)
        if not 0 <= day_of_week <= 6:
            raise ValidationError('days must be between 0 (Sunday) and 6 (Saturday)')
        now = datetime.now(timezone.utc)
        return cls(
            restaurant_id=restaurant_id,
            start_time=start_time,
            end_time=end_time,
            day_of_week=day_of_week,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def create_dated(
        cls, *, restaurant_id: int, start_time: str, end_time: str, specific_date: date
    ) -> 'Slot':
        cls._validate_window(start_time=start_time, end_time=end_time)
        now = datetime.now(timezone.utc)
        return cls(
            restaurant_id=restaurant_id,
            start_time=start_time,
            end_time=end_time,
            specific_date=specific_date,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_matchable(self) -> bool:
        return (self.day_of_week is None) != (self.specific_date is None)

    def matches(self, on: date) -> bool:
        if not self.is_active or not self.is_matchable:
            return False
        if self.specific_date is not None:
            return self.specific_date == on
        return self.day_of_week == day_of_week_of(on)

    @property
    def display_time(self) -> str:
        return f'{format_12h(self.start_time)} - {format_12h(self.end_time)}'


def normalize_days(days: Iterable[int]) -> list[int]:
    """Deduplicate while keeping the order the operator picked them in."""
    seen: dict[int, None] = {}
    for day in days:
        seen.setdefault(int(day), None)
    if not seen:
        raise ValidationError('Select at least one day')
    return list(seen)
