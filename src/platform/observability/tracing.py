"""
OpenTelemetry tracing configuration.

Provides:
- Tracer provider with OTLP export (Jaeger/Tempo) and optional console export
- Auto-instrumentation for FastAPI, SQLAlchemy, Redis

Use cases open their own spans (`use_case.create_reservation`, ...) through
`trace.get_tracer(__name__)`; without `setup()` those spans are no-ops.
"""

from typing import Any, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from src.platform.config.core_setting import settings


class TracingConfig:
    """
    Usage:
        # Initialize once at app startup
        tracing = TracingConfig(service_name=settings.SERVICE_NAME)
        tracing.setup()
        tracing.instrument_sqlalchemy(engine=database.engine)
        ...
        tracing.shutdown()
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: Optional[str] = None,
        enable_console: bool = False,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or settings.OTEL_EXPORTER_OTLP_ENDPOINT
        self.enable_console = enable_console or settings.OTEL_CONSOLE_EXPORT

        self._provider: TracerProvider | None = None

    def setup(self) -> None:
        """
        Install the global tracer provider. Call once at startup.

        Sampling is ALWAYS_ON at SDK level; volume control belongs to
        tail-based sampling in the collector (keep errors, sample successes).
        """
        resource = Resource(
            attributes={SERVICE_NAME: self.service_name, 'deployment.environment': settings.DEPLOY_ENV}
        )
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        if self.otlp_endpoint:
            self._provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint))
            )

        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        if hasattr(engine, 'sync_engine'):  # AsyncEngine
            SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        else:
            SQLAlchemyInstrumentor().instrument(engine=engine)

    def instrument_redis(self) -> None:
        RedisInstrumentor().instrument()

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()
