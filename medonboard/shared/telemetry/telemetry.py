"""OpenTelemetry tracing for the onboarding API.

Built from Settings at startup. Spans go to the console, an OTLP gRPC collector,
or nowhere (TELEMETRY_EXPORTER=none keeps context propagation only).
"""

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from medonboard.core.config import Settings

logger = logging.getLogger(__name__)

# Matched with re.search, so this also covers /health/ready.
_UNTRACED_URLS = "/api/v1/health"


def _build_exporter(kind: str, otlp_endpoint: str | None) -> SpanExporter | None:
    if kind == "none":
        return None
    if kind == "otlp":
        if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        logger.warning("TELEMETRY_EXPORTER=otlp without an endpoint; using console")
    elif kind != "console":
        logger.warning("Unknown telemetry exporter %r; using console", kind)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider plus the instrumentations attached to it."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            sample_rate=settings.telemetry_sample_rate,
        )

    def setup(self, exporter: str = "console", otlp_endpoint: str | None = None) -> bool:
        """Install the global tracer provider. Returns False when setup failed."""
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(self.sample_rate),
            )
            span_exporter = _build_exporter(exporter, otlp_endpoint)
            if span_exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(span_exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Failed to initialize telemetry")
            return False
        self.tracer_provider = provider
        logger.info(
            "Tracing enabled: service=%s version=%s exporter=%s",
            self.service_name,
            self.service_version,
            exporter,
        )
        return True

    def instrument(
        self,
        app: FastAPI,
        engine: AsyncEngine | None = None,
        redis_enabled: bool = False,
    ) -> None:
        """Attach FastAPI and logging instrumentation, plus SQLAlchemy/Redis when in use.

        A failing instrumentor is logged and skipped; the others still run.
        """
        if self.tracer_provider is None:
            return
        provider = self.tracer_provider
        steps = [
            (
                "fastapi",
                lambda: FastAPIInstrumentor.instrument_app(
                    app, tracer_provider=provider, excluded_urls=_UNTRACED_URLS
                ),
            ),
            (
                "logging",
                lambda: LoggingInstrumentor().instrument(
                    tracer_provider=provider, set_logging_format=True
                ),
            ),
        ]
        if engine is not None:
            steps.append(
                (
                    "sqlalchemy",
                    lambda: SQLAlchemyInstrumentor().instrument(
                        engine=engine.sync_engine, tracer_provider=provider
                    ),
                )
            )
        if redis_enabled:
            steps.append(
                ("redis", lambda: RedisInstrumentor().instrument(tracer_provider=provider))
            )
        for name, attach in steps:
            try:
                attach()
            except Exception:
                logger.exception("Failed to instrument %s", name)

    def shutdown(self) -> None:
        """Flush pending spans and release the provider."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Error during telemetry shutdown")
        self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
