"""
honeytrace.exporters - OpenTelemetry SpanExporter implementations.

This subpackage provides the SpanExporter that sends OpenTelemetry spans and
their events to Honeycomb through libhoney.

Example:
    >>> from opentelemetry import trace
    >>> from opentelemetry.sdk.trace import TracerProvider
    >>> from opentelemetry.sdk.trace.export import BatchSpanProcessor
    >>> from honeytrace.exporters import HoneycombExporter
    >>>
    >>> exporter = HoneycombExporter(writekey="abc123", dataset="my-traces")
    >>> provider = TracerProvider()
    >>> provider.add_span_processor(BatchSpanProcessor(exporter))
    >>> trace.set_tracer_provider(provider)
"""

from honeytrace.exporters.honeycomb_exporter import HoneycombExporter, USER_AGENT_ADDITION

__all__ = ["HoneycombExporter", "USER_AGENT_ADDITION"]
