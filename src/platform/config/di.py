"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.event.side_effect_queue import SideEffectQueue
from src.platform.state.redis_client import RedisClient
from src.service.dining.app.service.reservation_side_effects import ReservationSideEffects
from src.service.dining.driven_adapter.cache.dashboard_cache_impl import DashboardCacheImpl
from src.service.dining.driven_adapter.notifier.redis_change_notifier_impl import (
    RedisChangeNotifierImpl,
)
from src.service.dining.driven_adapter.notifier.whatsapp_guest_notifier_impl import (
    WhatsAppGuestNotifierImpl,
)
from src.service.dining.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine created lazily, disposed in lifespan shutdown)
    database = providers.Singleton(
        Database,
        url=config_service.provided.DATABASE_URL_ASYNC,
        echo=config_service.provided.DB_ECHO,
        pool_size=config_service.provided.DB_POOL_SIZE,
        max_overflow=config_service.provided.DB_POOL_MAX_OVERFLOW,
        pool_timeout=config_service.provided.DB_POOL_TIMEOUT,
        pool_recycle=config_service.provided.DB_POOL_RECYCLE,
        pool_pre_ping=config_service.provided.DB_POOL_PRE_PING,
    )

    # Unit of Work: a new session per call, injected as a factory (`.provider`)
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Redis (pool created in lifespan startup)
    redis_client = providers.Singleton(RedisClient, settings=config_service)

    # Driven adapters
    dashboard_cache = providers.Singleton(
        DashboardCacheImpl, redis_client=redis_client, settings=config_service
    )
    change_notifier = providers.Singleton(RedisChangeNotifierImpl, redis_client=redis_client)
    guest_notifier = providers.Singleton(WhatsAppGuestNotifierImpl, settings=config_service)

    # Auth (token verification only)
    jwt_auth = providers.Singleton(JwtAuth, settings=config_service)

    # Post-commit outbox (worker started in lifespan task group)
    side_effect_queue = providers.Singleton(
        SideEffectQueue, max_buffer_size=config_service.provided.SIDE_EFFECT_QUEUE_SIZE
    )
    reservation_side_effects = providers.Singleton(
        ReservationSideEffects,
        dashboard_cache=dashboard_cache,
        change_notifier=change_notifier,
        guest_notifier=guest_notifier,
        side_effect_queue=side_effect_queue,
    )


container = Container()


def cleanup() -> None:
    container.reset_singletons()
