from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.logging.service_context import get_service_context


SENSITIVE_KEYWORDS = frozenset({'password', 'token', 'secret', 'contact', 'phone'})
MASK = '********'
MAX_LOGGED_CHARS = 2000

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


# Noisy third-party loggers that are only useful when debugging the driver itself
_QUIET_LOGGERS = ('asyncio', 'aiosqlite', 'httpcore', 'sqlalchemy.engine.Engine')


class InterceptHandler(logging.Handler):
    """Route stdlib logging (uvicorn, sqlalchemy, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno <= logging.DEBUG and record.name.startswith(_QUIET_LOGGERS):
            return

        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


io_log_format = ' | '.join(
    (
        '<g>{time:YYYY-MM-DD HH:mm:ss.SSS}</>',
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{name}}:{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]}}</>',
    )
)


loguru_logger.remove()
custom_logger: 'LoguruLogger' = loguru_logger.bind(
    **{
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }
)

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'

custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

if settings.LOG_TO_FILE:
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    custom_logger.add(
        str(log_dir / f'{datetime.now(timezone.utc).strftime("%Y-%m-%d")}.log'),
        format=io_log_format,
        rotation='1 day',
        retention='14 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
