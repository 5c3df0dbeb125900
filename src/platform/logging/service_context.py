"""
Service context for log lines.

Every log record carries `<service>@<env>:<instance>` so lines from several
workers behind the same load balancer can be told apart.
"""

from functools import lru_cache
import os
import socket

from src.platform.config.core_setting import settings


@lru_cache(maxsize=1)
def get_service_context() -> str:
    instance = os.getenv('HOSTNAME') or socket.gethostname()
    return f'{settings.SERVICE_NAME}@{settings.DEPLOY_ENV}:{instance}:{os.getpid()}'
