"""Logging and OpenTelemetry setup."""

import logging
from typing import TYPE_CHECKING

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio
from structlog.typing import Processor

from src.infrastructure.observability.structlog_processor import (
    add_trace_context,
    redact_secrets,
)

if TYPE_CHECKING:
    from fastapi import FastAPI

# Module-level state for cleanup
_tracer_provider: TracerProvider | None = None


def configure_logging(*, level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog on top of the standard library logger.

    Args:
        level: Minimum log level name.
        json_logs: Render JSON lines when True, console output otherwise.
    """
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            redact_secrets,
            add_trace_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", level=level.upper())


def init_observability(
    service_name: str,
    service_version: str,
    *,
    log_level: str = "INFO",
    json_logs: bool = True,
    tracing_enabled: bool = False,
    otlp_endpoint: str | None = None,
    console_export: bool = False,
    sample_rate: float = 1.0,
    app: "FastAPI | None" = None,
) -> None:
    """Configure logging and, when enabled, OpenTelemetry tracing.

    With tracing disabled the global tracer provider is left alone, so
    spans from ``@traced`` are no-ops.

    Args:
        service_name: Name of the service for resource attribution.
        service_version: Version of the service.
        log_level: Minimum log level name.
        json_logs: Render logs as JSON lines.
        tracing_enabled: Whether to install a tracer provider.
        otlp_endpoint: OTLP collector endpoint (e.g., "http://localhost:4318").
        console_export: If True, export spans to the console.
        sample_rate: Sampling rate between 0.0 and 1.0.
        app: Optional FastAPI app instance to instrument.
    """
    global _tracer_provider

    configure_logging(level=log_level, json_logs=json_logs)

    if not tracing_enabled or _tracer_provider is not None:
        return

    resource = Resource.create(
        {
            SERVICE_NAME: service_name,
            SERVICE_VERSION: service_version,
        }
    )
    _tracer_provider = TracerProvider(
        resource=resource, sampler=ParentBasedTraceIdRatio(sample_rate)
    )

    if console_export:
        _tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    if otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=f"{otlp_endpoint}/v1/traces")
        _tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    trace.set_tracer_provider(_tracer_provider)

    if app is not None:
        FastAPIInstrumentor.instrument_app(app)


def shutdown_observability() -> None:
    """Flush pending spans and release the tracer provider."""
    global _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None
