"""
Integration fixtures: real repositories and UoW on SQLite, adapters mocked
"""

import pytest

from src.service.dining.app.command.cancel_reservation_use_case import CancelReservationUseCase
from src.service.dining.app.command.create_reservation_use_case import CreateReservationUseCase
from src.service.dining.app.command.move_reservation_use_case import MoveReservationUseCase
from src.service.dining.app.command.update_reservation_use_case import UpdateReservationUseCase
from src.service.dining.app.query.get_reservation_use_case import GetReservationUseCase


@pytest.fixture
def create_reservation(uow_factory, side_effects, settings) -> CreateReservationUseCase:
    return CreateReservationUseCase(
        uow_factory=uow_factory, side_effects=side_effects, settings=settings
    )


@pytest.fixture
def update_reservation(uow_factory, side_effects, settings) -> UpdateReservationUseCase:
    return UpdateReservationUseCase(
        uow_factory=uow_factory, side_effects=side_effects, settings=settings
    )


@pytest.fixture
def move_reservation(uow_factory, side_effects, settings) -> MoveReservationUseCase:
    return MoveReservationUseCase(
        uow_factory=uow_factory, side_effects=side_effects, settings=settings
    )


@pytest.fixture
def cancel_reservation(uow_factory, side_effects) -> CancelReservationUseCase:
    return CancelReservationUseCase(uow_factory=uow_factory, side_effects=side_effects)


@pytest.fixture
def get_reservation(uow_factory) -> GetReservationUseCase:
    return GetReservationUseCase(uow_factory=uow_factory)
