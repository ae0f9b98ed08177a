"""OpenTelemetry tracing setup for the demo server."""

import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Tracer

_tracer: Tracer | None = None


def setup_tracing(
    service_name: str = "mnexium-demo",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> Tracer:
    """Initialize OpenTelemetry tracing.

    Args:
        service_name: Name to identify this service in traces
        otlp_endpoint: OTLP gRPC endpoint (e.g., "localhost:4317").
            Falls back to OTEL_EXPORTER_OTLP_ENDPOINT env var
        console_export: Also export spans to console (for debugging)

    Returns:
        Configured Tracer instance
    """
    global _tracer

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))

    endpoint = otlp_endpoint or os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
        )

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)
    return _tracer


def get_current_trace_id() -> str | None:
    """Get the current trace ID as a hex string, or None outside a trace."""
    span = trace.get_current_span()
    if span and span.get_span_context().is_valid:
        return format(span.get_span_context().trace_id, "032x")
    return None
