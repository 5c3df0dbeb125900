from enum import StrEnum


class StaffRole(StrEnum):
    ADMIN = 'ADMIN'  # operator: books, moves, cancels, edits slots/tables
    STAFF = 'STAFF'  # read-only viewer
