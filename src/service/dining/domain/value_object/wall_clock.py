"""
Wall-clock helpers

Slots store start/end as zero-padded 24h `HH:MM` strings with no date attached.
Day-of-week numbering follows the Sunday-first convention (0 = Sunday ... 6 = Saturday).
"""

from datetime import date
import re

from src.platform.exception.exceptions import ValidationError


MINUTES_PER_DAY = 24 * 60

_WALL_CLOCK = re.compile(r'^([01]\d|2[0-3]):([0-5]\d)$')


def parse_wall_clock(value: str, *, field: str = 'time') -> int:
    """Return minutes since midnight for an `HH:MM` string."""
    match = _WALL_CLOCK.match(value or '')
    if not match:
        raise ValidationError(f'{field} must be in HH:MM 24-hour format')
    return int(match.group(1)) * 60 + int(match.group(2))


def format_wall_clock(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


def format_12h(value: str) -> str:
    minutes = parse_wall_clock(value)
    hour, minute = divmod(minutes, 60)
    suffix = 'AM' if hour < 12 else 'PM'
    return f'{hour % 12 or 12}:{minute:02d} {suffix}'


def day_of_week(value: date) -> int:
    return value.isoweekday() % 7


def is_within_window(minutes: int, *, start: int, end: int) -> bool:
    """Half-open [start, end) check that also handles windows crossing midnight."""
    if start < end:
        return start <= minutes < end
    return minutes >= start or minutes < end
