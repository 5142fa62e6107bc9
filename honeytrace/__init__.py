"""
honeytrace - Send OpenTelemetry traces to Honeycomb.

This package provides an OpenTelemetry SpanExporter that maps completed spans
and their events onto Honeycomb trace events and hands them to libhoney for
delivery, plus helpers to wire it into an application.

Example:
    >>> from honeytrace import setup_tracing, get_tracer
    >>> setup_tracing(writekey="abc123", dataset="my-traces", service_name="api")
    >>> tracer = get_tracer(__name__)
    >>> with tracer.start_as_current_span("handle_request") as span:
    ...     span.set_attribute("http.status_code", 200)
"""

__version__ = "0.1.0"

from honeytrace.config import ExporterConfig, DEFAULT_API_HOST
from honeytrace.core.events import AnnotationEvent, SpanEvent
from honeytrace.exporters.honeycomb_exporter import HoneycombExporter
from honeytrace.integrations.setup import setup_tracing, get_tracer, shutdown_tracing

__all__ = [
    "ExporterConfig",
    "DEFAULT_API_HOST",
    "AnnotationEvent",
    "SpanEvent",
    "HoneycombExporter",
    "setup_tracing",
    "get_tracer",
    "shutdown_tracing",
]
