"""
honeytrace.core.events - Honeycomb event model for OpenTelemetry spans.

This module provides the dataclasses that describe the fixed part of the
events sent to Honeycomb, together with the helpers used to derive them from
OpenTelemetry span data.

Classes:
    SpanEvent: Fixed fields of an event built from a span
    AnnotationEvent: Fixed fields of an event built from a span event

Functions:
    format_trace_id: Render a trace id as 32 hex digits
    format_span_id: Render a span id as 16 hex digits
    ns_to_datetime: Convert epoch nanoseconds to a UTC datetime
    duration_ms: Duration between two epoch nanosecond timestamps
    sample_rate_for: Honeycomb sample rate for a sampling fraction
    field_value: Convert an attribute value into an event field value
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

NANOS_PER_MILLI = 1_000_000
NANOS_PER_SECOND = 1_000_000_000

# Wire field names
TRACE_ID = "trace.trace_id"
SPAN_ID = "trace.span_id"
PARENT_ID = "trace.parent_id"
NAME = "name"
DURATION_MS = "duration_ms"
TIMESTAMP = "timestamp"
ANNOTATION = "trace.annotation"
SERVICE_NAME = "service_name"
STATUS_CODE = "status_code"
STATUS_DESCRIPTION = "status_description"


def format_trace_id(trace_id: int) -> str:
    """Render a trace id the way W3C trace context does (32 hex digits)."""
    return format(trace_id, "032x")


def format_span_id(span_id: int) -> str:
    """Render a span id the way W3C trace context does (16 hex digits)."""
    return format(span_id, "016x")


def ns_to_datetime(ns: Optional[int]) -> Optional[datetime]:
    """Convert epoch nanoseconds to an aware UTC datetime.

    Args:
        ns: Nanoseconds since the Unix epoch. None or 0 means unset.

    Returns:
        The datetime, or None when the timestamp is unset.
    """
    if not ns:
        return None
    seconds, remainder = divmod(ns, NANOS_PER_SECOND)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(
        microsecond=remainder // 1000
    )


def duration_ms(start_ns: Optional[int], end_ns: Optional[int]) -> float:
    """Return the duration in milliseconds, or 0.0 if either end is unset."""
    if not start_ns or not end_ns:
        return 0.0
    return (end_ns - start_ns) / NANOS_PER_MILLI


def sample_rate_for(sample_fraction: float) -> Optional[int]:
    """Translate a sampling fraction into a Honeycomb sample rate.

    A fraction of 0.25 means one in four traces was kept, so every event
    stands for 4 events. A fraction of 0, or one so small that its inverse
    overflows, leaves the rate untouched.

    Args:
        sample_fraction: Fraction of traces kept by the upstream sampler.

    Returns:
        round(1 / sample_fraction), or None when sample_fraction is 0 or the
        inverse is not finite.
    """
    if sample_fraction == 0:
        return None
    rate = 1 / sample_fraction
    if not math.isfinite(rate):
        return None
    return round(rate)


def field_value(value: Any) -> Any:
    """Convert an OpenTelemetry attribute value into an event field value.

    Scalars (str, bool, int, float) and datetimes are kept as they are.
    Homogeneous attribute sequences are turned into lists. Anything else is
    stringified so that the event stays JSON serializable.
    """
    if value is None or isinstance(value, (str, bool, int, float, datetime)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Sequence):
        return [field_value(item) for item in value]
    return str(value)


@dataclass
class SpanEvent:
    """Fixed fields of a Honeycomb event built from a completed span.

    Attributes:
        trace_id: Hex trace id of the span
        name: Span name
        span_id: Hex span id
        parent_id: Hex id of the parent span, empty for root spans
        duration_ms: Span duration in milliseconds (0.0 when unknown)
        timestamp: Span start time, None when unset
    """
    trace_id: str
    name: str
    span_id: str
    parent_id: str = ""
    duration_ms: float = 0.0
    timestamp: Optional[datetime] = None

    @classmethod
    def from_span(cls, span: Any) -> SpanEvent:
        """Build the fixed fields from an OpenTelemetry ReadableSpan."""
        context = span.context
        parent_id = ""
        if span.parent is not None and span.parent.span_id:
            parent_id = format_span_id(span.parent.span_id)

        return cls(
            trace_id=format_trace_id(context.trace_id),
            name=span.name,
            span_id=format_span_id(context.span_id),
            parent_id=parent_id,
            duration_ms=duration_ms(span.start_time, span.end_time),
            timestamp=ns_to_datetime(span.start_time),
        )

    def to_fields(self) -> Dict[str, Any]:
        """Return the wire fields, omitting an empty parent id and timestamp."""
        fields: Dict[str, Any] = {
            TRACE_ID: self.trace_id,
            NAME: self.name,
            SPAN_ID: self.span_id,
        }
        if self.parent_id:
            fields[PARENT_ID] = self.parent_id
        fields[DURATION_MS] = self.duration_ms
        if self.timestamp is not None:
            fields[TIMESTAMP] = self.timestamp.isoformat()
        return fields


@dataclass
class AnnotationEvent:
    """Fixed fields of a Honeycomb event built from a span event.

    Attributes:
        name: Message of the span event
        trace_id: Hex trace id of the owning span
        parent_id: Hex span id of the owning span
        timestamp: Time the span event was recorded
    """
    name: str
    trace_id: str
    parent_id: str
    timestamp: Optional[datetime] = None

    @classmethod
    def from_annotation(cls, span: Any, annotation: Any) -> AnnotationEvent:
        """Build the fixed fields from a span and one of its events."""
        return cls(
            name=annotation.name,
            trace_id=format_trace_id(span.context.trace_id),
            parent_id=format_span_id(span.context.span_id),
            timestamp=ns_to_datetime(annotation.timestamp),
        )

    def to_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            NAME: self.name,
            TRACE_ID: self.trace_id,
            PARENT_ID: self.parent_id,
        }
        if self.timestamp is not None:
            fields[TIMESTAMP] = self.timestamp.isoformat()
        fields[ANNOTATION] = True
        return fields
