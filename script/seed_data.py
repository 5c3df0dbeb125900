#!/usr/bin/env python3
"""
Database Seed Script
Populate a demo restaurant

Features:
1. Create Tables - T1..T8 with mixed capacities
2. Create Slots - lunch and two dinner seatings on every day of the week
3. Print an operator token for the seeded restaurant

Notes:
- Run against a freshly reset database (`python script/reset_database.py`)
- Writes go through the repositories in one Unit of Work, no side effects
"""

import asyncio
from dataclasses import dataclass
import os

from src.platform.config.di import container
from src.service.dining.domain.entity.slot_entity import Slot
from src.service.dining.domain.entity.table_entity import Table
from src.service.dining.domain.enum.staff_role import StaffRole


RESTAURANT_ID = int(os.getenv('SEED_RESTAURANT_ID', '1'))
ALL_DAYS = range(7)  # 0 = Sunday


@dataclass
class SlotConfig:
    start_time: str
    end_time: str


TABLES = [
    ('T1', 2),
    ('T2', 2),
    ('T3', 4),
    ('T4', 4),
    ('T5', 4),
    ('T6', 6),
    ('T7', 6),
    ('T8', 8),
]

SLOTS = [
    SlotConfig(start_time='12:30', end_time='14:30'),
    SlotConfig(start_time='19:00', end_time='20:30'),
    SlotConfig(start_time='21:00', end_time='22:30'),
]


async def seed() -> None:
    async with container.unit_of_work() as uow:
        for number, capacity in TABLES:
            await uow.table_repo.create(
                table=Table.create(
                    restaurant_id=RESTAURANT_ID, table_number=number, capacity=capacity
                )
            )
        print(f'   ✅ {len(TABLES)} tables created')

        for config in SLOTS:
            for day in ALL_DAYS:
                await uow.slot_repo.create(
                    slot=Slot.create_recurring(
                        restaurant_id=RESTAURANT_ID,
                        start_time=config.start_time,
                        end_time=config.end_time,
                        day_of_week=day,
                    )
                )
        print(f'   ✅ {len(SLOTS) * len(ALL_DAYS)} weekly slots created')

        await uow.commit()


async def main() -> None:
    print('🌱 Starting data seeding...')
    print('=' * 50)

    database = container.database()
    try:
        await seed()
        print()
        print('=' * 50)
        print(f'🌱 Restaurant {RESTAURANT_ID} seeded!')
        token = container.jwt_auth().create_jwt_token(
            restaurant_id=RESTAURANT_ID, role=StaffRole.ADMIN
        )
        print(f'📋 Operator token: {token}')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        raise SystemExit(1)

    finally:
        await database.dispose()


if __name__ == '__main__':
    asyncio.run(main())
