from contextlib import asynccontextmanager
from typing import AsyncGenerator, Any

from fastapi import APIRouter, Response
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
    start_http_server,
)
import structlog

from peniel.core.config import settings

logger = structlog.get_logger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status_code"]
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

INSPIRATION_OUTCOMES = Counter(
    "daily_inspiration_outcomes_total",
    "Daily inspiration requests by outcome",
    ["outcome"],  # success, empty_result, unexpected_failure
)

EMAILS_SENT = Counter(
    "contact_emails_total", "Contact form emails", ["status"]
)

FILE_UPLOADS = Counter(
    "file_uploads_total", "Files uploaded to storage", ["bucket", "status"]
)

DATABASE_OPERATIONS = Counter(
    "database_operations_total",
    "Total database operations",
    ["operation", "table", "status", "exception_type"],
)


def setup_observability() -> None:
    """Setup OpenTelemetry and Prometheus metrics."""

    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": settings.version,
            "service.environment": settings.environment,
        }
    )

    trace.set_tracer_provider(TracerProvider(resource=resource))

    if settings.otel_exporter_otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(
            endpoint=settings.otel_exporter_otlp_endpoint,
            insecure=not settings.is_production(),
        )
        span_processor = BatchSpanProcessor(otlp_exporter)
        trace.get_tracer_provider().add_span_processor(span_processor)

    SQLAlchemyInstrumentor().instrument()

    if settings.prometheus_metrics_enabled and not settings.is_testing():
        try:
            start_http_server(settings.prometheus_metrics_port)
            logger.info(
                "Prometheus metrics server started",
                port=settings.prometheus_metrics_port,
            )
        except Exception as e:
            logger.error("Failed to start Prometheus metrics server", error=str(e))


def get_tracer() -> trace.Tracer:
    """Get OpenTelemetry tracer."""
    return trace.get_tracer(__name__)


@asynccontextmanager
async def trace_async_operation(
    operation_name: str, **attributes: Any
) -> AsyncGenerator[trace.Span, None]:
    """Context manager for tracing async operations."""
    tracer = get_tracer()
    with tracer.start_as_current_span(operation_name) as span:
        for key, value in attributes.items():
            span.set_attribute(key, str(value))
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


class MetricsCollector:
    """Helper class for collecting application metrics."""

    @staticmethod
    def record_http_request(
        method: str, endpoint: str, status_code: int, duration: float
    ) -> None:
        """Record HTTP request metrics."""
        REQUEST_COUNT.labels(
            method=method, endpoint=endpoint, status_code=status_code
        ).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)

    @staticmethod
    def record_inspiration_outcome(outcome: str) -> None:
        INSPIRATION_OUTCOMES.labels(outcome=outcome).inc()

    @staticmethod
    def record_email(status: str) -> None:
        EMAILS_SENT.labels(status=status).inc()

    @staticmethod
    def record_upload(bucket: str, status: str) -> None:
        FILE_UPLOADS.labels(bucket=bucket, status=status).inc()

    @staticmethod
    def record_database_operation(
        operation: str, table: str, status: str, exception_type: str | None = None
    ) -> None:
        """Record database operation metrics."""
        DATABASE_OPERATIONS.labels(
            operation=operation,
            table=table,
            status=status,
            exception_type=exception_type or "none",
        ).inc()


# Global metrics collector instance
metrics = MetricsCollector()

metrics_router = APIRouter()


@metrics_router.get("/metrics")
async def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
