from pathlib import Path
from typing import List

import orjson
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Table Reservation System'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    DEPLOY_ENV: str = 'local_dev'
    SERVICE_NAME: str = 'table-reservation'

    # Logging
    LOG_TO_FILE: bool = False
    LOG_DIR: str = 'logs'

    # Security (tokens are issued by the identity service, only verified here)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_COOKIE_NAME: str = 'access_token'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.startswith('['):
            return orjson.loads(v)
        if isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'table_reservation'
    DATABASE_URL: str = ''  # Overrides the POSTGRES_* assembly when set

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds
    DB_POOL_RECYCLE: int = 3600  # seconds
    DB_POOL_PRE_PING: bool = True
    DB_ECHO: bool = False

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@{self.POSTGRES_SERVER}:'
            f'{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Redis (cache + pub/sub)
    REDIS_HOST: str = 'localhost'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ''
    REDIS_DECODE_RESPONSES: bool = True
    REDIS_POOL_MAX_CONNECTIONS: int = 50
    REDIS_POOL_SOCKET_TIMEOUT: int = 5  # seconds
    REDIS_POOL_SOCKET_CONNECT_TIMEOUT: int = 5  # seconds
    REDIS_POOL_HEALTH_CHECK_INTERVAL: int = 30  # seconds

    # Tracing (no exporter when the endpoint is empty)
    OTEL_EXPORTER_OTLP_ENDPOINT: str = ''
    OTEL_CONSOLE_EXPORT: bool = False

    # Create missing tables at startup (local dev; migrations own production schemas)
    DB_CREATE_ALL_ON_STARTUP: bool = False

    # Dashboard summary cache
    DASHBOARD_CACHE_TTL_SECONDS: int = 300

    # Side-effect queue (post-commit notify/publish jobs)
    SIDE_EFFECT_QUEUE_SIZE: int = 1000

    # WhatsApp template gateway
    WHATSAPP_API_URL: str = 'https://api.gupshup.io/wa/api/v1/template/msg'
    WHATSAPP_API_KEY: SecretStr = SecretStr('')
    WHATSAPP_SOURCE_NUMBER: str = ''
    WHATSAPP_COUNTRY_CODE: str = '91'
    WHATSAPP_TIMEOUT_SECONDS: float = 10.0
    WHATSAPP_TEMPLATE_RESERVATION_CONFIRMATION: str = 'reservation_confirmation'
    WHATSAPP_TEMPLATE_WEEKDAY_BRUNCH: str = 'weekday_brunch_confirmation'
    WHATSAPP_TEMPLATE_WEEKEND_BRUNCH: str = 'weekend_brunch_confirmation'
    WHATSAPP_TEMPLATE_RESERVATION_UPDATE: str = 'reservation_update'
    WHATSAPP_TEMPLATE_RESERVATION_MOVED: str = 'reservation_moved'

    @property
    def REDIS_URL(self) -> str:
        return f'redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}'


settings = Settings()  # type: ignore
