#!/usr/bin/env python3
"""
Database Reset Script
Reset the reservation database structure

Features:
1. Drop every table - completely wipe the schema
2. Run Alembic Migrations - create the latest schema
3. Drop cached dashboard summaries from Redis

Notes:
- This script only resets database structure, does not seed test data
- To seed test data, run `python script/seed_data.py`
"""

import asyncio
import os
from pathlib import Path
import subprocess

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from src.platform.config.core_setting import settings


BASE_DIR = Path(__file__).resolve().parents[1]
TABLES = ('reservation', 'slot_availability', 'slot', 'dining_table', 'alembic_version')


async def drop_all_tables() -> None:
    engine = create_async_engine(settings.DATABASE_URL_ASYNC)
    try:
        async with engine.begin() as conn:
            for table in TABLES:
                await conn.execute(text(f'DROP TABLE IF EXISTS {table} CASCADE'))
                print(f"   ✅ Table '{table}' dropped")
    finally:
        await engine.dispose()


def _run_alembic_migrations() -> None:
    """Run Alembic migrations"""
    print("   🔄 Running 'alembic upgrade head'...")

    result = subprocess.run(
        ['alembic', 'upgrade', 'head'],
        cwd=BASE_DIR,
        capture_output=True,
        text=True,
        env=os.environ.copy(),
    )

    if result.returncode != 0:
        print(f'   ❌ Migration failed (return code: {result.returncode})')
        if result.stdout:
            print(f'   📋 STDOUT: {result.stdout}')
        if result.stderr:
            print(f'   📋 STDERR: {result.stderr}')
        raise RuntimeError(f'Alembic migration failed with return code {result.returncode}')

    print('   ✅ Database migrations completed')


async def flush_dashboard_cache() -> None:
    """Delete cached summaries of every restaurant"""
    try:
        print('🗑️  Flushing dashboard cache...')
        client = aioredis.from_url(
            settings.REDIS_URL, password=settings.REDIS_PASSWORD or None, decode_responses=True
        )
        pattern = f'{settings.DEPLOY_ENV}:dashboard:summary:*'
        keys = [key async for key in client.scan_iter(match=pattern)]
        if keys:
            await client.delete(*keys)
        await client.aclose()
        print(f'✅ Removed {len(keys)} cached summaries')

    except RedisError as e:
        print(f'⚠️  Failed to flush dashboard cache (non-critical): {e}')
        print('    Redis may not be running, continuing anyway...')


async def main() -> None:
    print('🔄 Starting database reset...')
    print('=' * 50)

    try:
        print(f'Database URL: {settings.DATABASE_URL_ASYNC}')
        print('🗑️ Dropping tables...')
        await drop_all_tables()

        print('🏗️ Running database migrations...')
        _run_alembic_migrations()
        print()

        await flush_dashboard_cache()
        print()

        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed test data, run: python script/seed_data.py')

    except Exception as e:
        print(f'❌ Reset failed: {e}')
        raise SystemExit(1)


if __name__ == '__main__':
    asyncio.run(main())
