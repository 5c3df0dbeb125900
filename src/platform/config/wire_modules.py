"""
Wire Modules Configuration

Modules whose `Provide[...]` markers are resolved by the container.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.dining.app.command import (
    cancel_reservation_use_case,
    create_reservation_use_case,
    create_slots_use_case,
    delete_slot_use_case,
    manage_table_use_case,
    move_reservation_use_case,
    update_reservation_use_case,
    upsert_slot_override_use_case,
)
from src.service.dining.app.query import (
    get_dashboard_summary_use_case,
    get_reservation_use_case,
    get_table_availability_use_case,
    list_bookable_slots_use_case,
    list_slot_overrides_use_case,
    list_slots_use_case,
    list_tables_use_case,
    stream_reservation_updates_use_case,
)
from src.service.dining.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    create_slots_use_case,
    delete_slot_use_case,
    upsert_slot_override_use_case,
    manage_table_use_case,
    create_reservation_use_case,
    update_reservation_use_case,
    move_reservation_use_case,
    cancel_reservation_use_case,
    list_slots_use_case,
    list_bookable_slots_use_case,
    list_slot_overrides_use_case,
    list_tables_use_case,
    get_table_availability_use_case,
    get_reservation_use_case,
    get_dashboard_summary_use_case,
    stream_reservation_updates_use_case,
    role_auth,
]
