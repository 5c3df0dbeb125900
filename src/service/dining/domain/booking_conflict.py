"""
Booking conflict rules

The in-memory check here is the fast path that produces a readable error.
The partial unique index on (table_id, slot_id, date) WHERE status = 'BOOKED'
is what actually guarantees a table is never double booked.
"""

from typing import Iterable, Sequence

import attrs

from src.platform.exception.exceptions import ValidationError
from src.service.dining.domain.entity.reservation_entity import Reservation


def collect_table_ids(table_id: int | None, extra_table_ids: Iterable[int] = ()) -> list[int]:
    """Primary table first, then extra tables, duplicates removed."""
    ordered: dict[int, None] = {}
    if table_id is not None:
        ordered[table_id] = None
    for extra in extra_table_ids:
        ordered.setdefault(extra, None)
    if not ordered:
        raise ValidationError('At least one table is required')
    return list(ordered)


def find_conflicts(
    *,
    live_reservations: Iterable[Reservation],
    table_ids: Iterable[int],
    exclude_reservation_ids: Iterable[int] = (),
) -> list[Reservation]:
    """Live reservations that already hold one of `table_ids`, ignoring `exclude_reservation_ids`."""
    wanted = set(table_ids)
    excluded = set(exclude_reservation_ids)
    return [
        r
        for r in live_reservations
        if r.is_live and r.table_id in wanted and r.id not in excluded
    ]


@attrs.frozen
class MovePlan:
    keep_ids: tuple[int, ...]  # rows already on a target table
    reassign: tuple[tuple[int, int], ...]  # (reservation_id, new table_id)
    add_table_ids: tuple[int, ...]  # targets left over once every row is placed
    release_ids: tuple[int, ...]  # rows left over once every target is filled

    @property
    def resulting_table_count(self) -> int:
        return len(self.keep_ids) + len(self.reassign) + len(self.add_table_ids)


def plan_move(*, rows: Sequence[Reservation], target_table_ids: Sequence[int]) -> MovePlan:
    """
    Map the rows of a reservation (group) onto the target tables.

    Rows already sitting on a target keep it, so no row is ever written onto a
    table still held by a sibling row. Remaining rows take the remaining
    targets in order; the surplus on either side is inserted or released.
    """
    targets = list(dict.fromkeys(target_table_ids))
    live_rows = sorted((r for r in rows if r.is_live), key=lambda r: r.id or 0)

    keep: list[int] = []
    movable: list[Reservation] = []
    taken: set[int] = set()
    for row in live_rows:
        if row.table_id in targets and row.table_id not in taken:
            keep.append(row.id or 0)
            taken.add(row.table_id)
        else:
            movable.append(row)

    free_targets = [t for t in targets if t not in taken]
    reassign = tuple(
        (row.id or 0, table_id) for row, table_id in zip(movable, free_targets, strict=False)
    )
    return MovePlan(
        keep_ids=tuple(keep),
        reassign=reassign,
        add_table_ids=tuple(free_targets[len(movable) :]),
        release_ids=tuple(row.id or 0 for row in movable[len(free_targets) :]),
    )
