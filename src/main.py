"""
Production FastAPI Application

Lifespan owns every long-lived resource: database engine, Redis pool, the
side-effect worker and tracing.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Reservation Service] Starting up...')

    tracing = TracingConfig(service_name=settings.SERVICE_NAME)
    tracing.setup()
    Logger.base.info('📊 [Reservation Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Reservation Service] Dependency injection wired')

    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)
    if settings.DB_CREATE_ALL_ON_STARTUP:
        await database.create_all()
        Logger.base.info('🗄️  [Reservation Service] Tables ensured')
    Logger.base.info('🗄️  [Reservation Service] Database engine ready + instrumented')

    tracing.instrument_redis()
    await container.redis_client().initialize()

    side_effect_queue = container.side_effect_queue()

    async with anyio.create_task_group() as tg:
        await tg.start(side_effect_queue.run)
        Logger.base.info('✅ [Reservation Service] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Reservation Service] Shutting down...')
        flushed = await side_effect_queue.drain()
        Logger.base.info(f'📬 [Reservation Service] Flushed {flushed} pending side effects')
        tg.cancel_scope.cancel()

    await container.redis_client().disconnect()
    await database.dispose()

    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Reservation Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
