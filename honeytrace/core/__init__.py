"""
honeytrace.core - Event model shared by the exporter and its tests.

This subpackage contains:
- events: SpanEvent and AnnotationEvent dataclasses and the field helpers
  used to map OpenTelemetry spans onto Honeycomb events
"""

from honeytrace.core.events import (
    AnnotationEvent,
    SpanEvent,
    duration_ms,
    field_value,
    format_span_id,
    format_trace_id,
    ns_to_datetime,
    sample_rate_for,
)

__all__ = [
    "AnnotationEvent",
    "SpanEvent",
    "duration_ms",
    "field_value",
    "format_span_id",
    "format_trace_id",
    "ns_to_datetime",
    "sample_rate_for",
]
