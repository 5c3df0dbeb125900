"""
Test Configuration and Fixtures

This module provides:
- Test environment variables (set before any application import)
- A file-backed SQLite database per test (aiosqlite), schema from the ORM models
- Unit of Work factory and side-effect wiring with mocked cache/notifiers
- Seed helpers for tables and slots

Architecture:
- Unit tests (test/**/unit/): mock the UoW and adapters, no database
- Integration tests: real repositories and UoW against SQLite
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sink are created at import time
# =============================================================================
import os


def _early_setup_test_environment() -> None:
    os.environ['DEPLOY_ENV'] = 'test'
    os.environ.setdefault('DEBUG', 'false')
    os.environ.setdefault('LOG_TO_FILE', 'false')
    os.environ['SECRET_KEY'] = 'test-secret-key-for-the-dining-engine-0123456789'
    # Guest notifications stay disabled unless a test configures the gateway
    os.environ['WHATSAPP_API_KEY'] = ''
    os.environ['WHATSAPP_SOURCE_NUMBER'] = ''


_early_setup_test_environment()

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import date  # noqa: E402
from pathlib import Path  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402

from src.platform.config.core_setting import Settings  # noqa: E402
from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from src.platform.event.side_effect_queue import SideEffectQueue  # noqa: E402
from src.service.dining.app.service.reservation_side_effects import (  # noqa: E402
    ReservationSideEffects,
)
from src.service.dining.domain.entity.slot_entity import Slot  # noqa: E402
from src.service.dining.domain.entity.table_entity import Table  # noqa: E402
from src.service.dining.domain.value_object.party_details import PartyDetails  # noqa: E402
from test.constants import RESTAURANT_ID  # noqa: E402




# =============================================================================
# Shared Fixtures
# =============================================================================
@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def party() -> PartyDetails:
    return PartyDetails.create(
        customer_name='Asha Patel', contact='9876543210', adults=4, kids=2, food_pref='Jain'
    )


# =============================================================================
# Database Fixtures (integration)
# =============================================================================
@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "dining.db"}')
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.session)


@pytest.fixture
def dashboard_cache() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def change_notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def guest_notifier() -> AsyncMock:
    notifier = AsyncMock()
    notifier.send_guest_confirmation.return_value = True
    return notifier


@pytest.fixture
def side_effect_queue() -> SideEffectQueue:
    return SideEffectQueue(max_buffer_size=50)


@pytest.fixture
def side_effects(
    dashboard_cache: AsyncMock,
    change_notifier: AsyncMock,
    guest_notifier: AsyncMock,
    side_effect_queue: SideEffectQueue,
) -> ReservationSideEffects:
    return ReservationSideEffects(
        dashboard_cache=dashboard_cache,
        change_notifier=change_notifier,
        guest_notifier=guest_notifier,
        side_effect_queue=side_effect_queue,
    )


# =============================================================================
# Seed Helpers
# =============================================================================
@pytest.fixture
def seed_tables(uow_factory) -> Callable[..., Awaitable[list[Table]]]:
    async def _seed(
        *numbers_and_capacity: tuple[str, int], restaurant_id: int = RESTAURANT_ID
    ) -> list[Table]:
        created = []
        async with uow_factory() as uow:
            for number, capacity in numbers_and_capacity:
                created.append(
                    await uow.table_repo.create(
                        table=Table.create(
                            restaurant_id=restaurant_id, table_number=number, capacity=capacity
                        )
                    )
                )
            await uow.commit()
        return created

    return _seed


@pytest.fixture
def seed_slot(uow_factory) -> Callable[..., Awaitable[Slot]]:
    async def _seed(
        *,
        start_time: str = '19:00',
        end_time: str = '20:30',
        day_of_week: int | None = 6,
        specific_date: date | None = None,
        restaurant_id: int = RESTAURANT_ID,
    ) -> Slot:
        if specific_date is not None:
            draft = Slot.create_dated(
                restaurant_id=restaurant_id,
                start_time=start_time,
                end_time=end_time,
                specific_date=specific_date,
            )
        else:
            draft = Slot.create_recurring(
                restaurant_id=restaurant_id,
                start_time=start_time,
                end_time=end_time,
                day_of_week=day_of_week,
            )
        async with uow_factory() as uow:
            slot = await uow.slot_repo.create(slot=draft)
            await uow.commit()
        return slot

    return _seed
