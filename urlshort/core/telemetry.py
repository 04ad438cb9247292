"""OpenTelemetry setup for the URL shortener.

Telemetry is off unless ``OTEL_ENABLED`` is set. Module-level tracers and
meters are taken from the global API providers, which are no-ops until
``setup_telemetry`` installs the SDK ones.
"""

from functools import lru_cache
from typing import Dict, Optional, Tuple

from loguru import logger
from opentelemetry import metrics, trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio, Sampler, TraceIdRatioBased

from urlshort.core.config import settings


@lru_cache
def setup_telemetry() -> Tuple[Optional[TracerProvider], Optional[MeterProvider]]:
    """Install SDK tracer and meter providers exporting over OTLP.

    Returns:
        The installed providers, or ``(None, None)`` when telemetry is
        disabled or could not be initialized
    """
    if not settings.OTEL_ENABLED:
        logger.info("OpenTelemetry instrumentation is disabled")
        return None, None

    resource = Resource.create({
        "service.name": settings.OTEL_SERVICE_NAME,
        "service.version": settings.APP_VERSION,
        "deployment.environment": settings.ENVIRONMENT.value,
        **parse_resource_attributes(settings.OTEL_RESOURCE_ATTRIBUTES),
    })

    try:
        span_exporter, metric_exporter = _create_exporters()
    except Exception as e:
        logger.error("Failed to initialize OpenTelemetry exporters", error=str(e))
        return None, None

    tracer_provider = TracerProvider(resource=resource, sampler=create_sampler())
    tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(
        metric_exporter,
        export_interval_millis=settings.OTEL_METRICS_EXPORT_INTERVAL_MILLIS,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(meter_provider)

    logger.info(
        "OpenTelemetry configured",
        protocol=settings.OTEL_EXPORTER_OTLP_PROTOCOL,
        endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
    )
    return tracer_provider, meter_provider


def _create_exporters() -> Tuple[SpanExporter, MetricExporter]:
    if settings.OTEL_EXPORTER_OTLP_PROTOCOL.lower() == "grpc":
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        return (
            OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT, insecure=True),
            OTLPMetricExporter(endpoint=settings.OTEL_EXPORTER_OTLP_METRICS_ENDPOINT, insecure=True),
        )

    from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

    return (
        OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT),
        OTLPMetricExporter(endpoint=settings.OTEL_EXPORTER_OTLP_METRICS_ENDPOINT),
    )


def create_sampler() -> Sampler:
    """Build the trace sampler named by ``OTEL_TRACES_SAMPLER``."""
    ratio = float(settings.OTEL_TRACES_SAMPLER_ARG)
    if settings.OTEL_TRACES_SAMPLER.lower() == "parentbased_traceidratio":
        return ParentBasedTraceIdRatio(ratio)
    return TraceIdRatioBased(ratio)


def parse_resource_attributes(raw: str) -> Dict[str, str]:
    """Parse ``key=value,key=value`` into a dict, skipping malformed pairs."""
    attributes = {}
    for pair in (raw or "").split(","):
        key, sep, value = pair.partition("=")
        if sep and key.strip():
            attributes[key.strip()] = value.strip()
    return attributes


def get_tracer(name: Optional[str] = None) -> trace.Tracer:
    return trace.get_tracer(name or settings.OTEL_SERVICE_NAME)


def get_meter(name: Optional[str] = None) -> metrics.Meter:
    return metrics.get_meter(name or settings.OTEL_SERVICE_NAME)
