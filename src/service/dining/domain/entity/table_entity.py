import re
from typing import Optional

import attrs

from src.platform.exception.exceptions import ValidationError


@attrs.define
class Table:
    restaurant_id: int
    table_number: str
    capacity: int
    id: Optional[int] = None

    @classmethod
    def create(cls, *, restaurant_id: int, table_number: str, capacity: int) -> 'Table':
        table_number = (table_number or '').strip()
        if not table_number:
            raise ValidationError('table_number is required')
        if capacity < 1:
            raise ValidationError('capacity must be a positive integer')
        return cls(restaurant_id=restaurant_id, table_number=table_number, capacity=capacity)


_DIGITS = re.compile(r'(\d+)')


def table_number_sort_key(table_number: str) -> tuple:
    """Natural order: "T2" before "T10", "2" before "10"."""
    return tuple(
        (0, int(part), '') if part.isdigit() else (1, 0, part.lower())
        for part in _DIGITS.split(table_number)
        if part
    )
