"""
Conftest for use case unit tests - UoW and repositories are mocks.
"""

import attrs
import pytest

from src.service.dining.domain.entity.slot_entity import Slot
from src.service.dining.domain.entity.table_entity import Table
from test.service.dining.fakes import FakeUnitOfWork


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def mock_uow_factory(uow: FakeUnitOfWork):
    return lambda: uow


@pytest.fixture
def saturday_slot() -> Slot:
    slot = Slot.create_recurring(restaurant_id=1, start_time='19:00', end_time='20:30', day_of_week=6)
    return attrs.evolve(slot, id=3)


@pytest.fixture
def tables() -> list[Table]:
    return [
        Table(id=1, restaurant_id=1, table_number='T1', capacity=4),
        Table(id=2, restaurant_id=1, table_number='T2', capacity=2),
        Table(id=3, restaurant_id=1, table_number='T10', capacity=6),
    ]
