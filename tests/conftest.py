"""Shared fixtures for honeytrace tests.

libhoney's real Client is used with an in-memory transmission, so events go
through the same code path as in production without touching the network.
"""

from __future__ import annotations

import queue
from typing import Any, Dict, List, Optional

import libhoney
import pytest
from opentelemetry.trace import StatusCode

from honeytrace.exporters import HoneycombExporter

# 2018-06-01T12:00:00Z in nanoseconds
BASE_TIME_NS = 1_527_854_400_000_000_000


class RecordingTransmission:
    """libhoney transmission that keeps every event instead of sending it."""

    def __init__(self) -> None:
        self.events: List[libhoney.Event] = []
        self.started = False
        self.flushed = False
        self.closed = False
        self._responses: queue.Queue = queue.Queue()

    def start(self) -> None:
        self.started = True

    def send(self, ev: libhoney.Event) -> None:
        self.events.append(ev)

    def flush(self) -> None:
        self.flushed = True

    def close(self) -> None:
        self.closed = True

    def get_response_queue(self) -> queue.Queue:
        return self._responses


class MockSpanContext:
    """Mock SpanContext for testing."""

    def __init__(self, trace_id: int, span_id: int):
        self.trace_id = trace_id
        self.span_id = span_id


class MockStatus:
    """Mock Status for testing."""

    def __init__(self, status_code: StatusCode = StatusCode.UNSET, description: Optional[str] = None):
        self.status_code = status_code
        self.description = description


class MockEvent:
    """Mock span Event (annotation) for testing."""

    def __init__(self, name: str, timestamp: int, attributes: Optional[Dict[str, Any]] = None):
        self.name = name
        self.timestamp = timestamp
        self.attributes = attributes or {}


class MockReadableSpan:
    """Mock ReadableSpan for testing."""

    def __init__(
        self,
        name: str,
        trace_id: int,
        span_id: int,
        parent_span_id: Optional[int] = None,
        start_time: Optional[int] = BASE_TIME_NS,
        end_time: Optional[int] = BASE_TIME_NS + 150_000_000,
        status: Optional[MockStatus] = None,
        attributes: Optional[dict] = None,
        events: Optional[List[MockEvent]] = None,
    ):
        self.name = name
        self.context = MockSpanContext(trace_id, span_id)
        self.parent = MockSpanContext(trace_id, parent_span_id) if parent_span_id is not None else None
        self.start_time = start_time
        self.end_time = end_time
        self.status = status or MockStatus()
        self.attributes = attributes or {}
        self.events = tuple(events or ())


@pytest.fixture
def transmission() -> RecordingTransmission:
    """In-memory transmission capturing sent events."""
    return RecordingTransmission()


@pytest.fixture
def client(transmission: RecordingTransmission) -> libhoney.Client:
    """libhoney client wired to the recording transmission."""
    hc = libhoney.Client(
        writekey="test-writekey",
        dataset="test-dataset",
        transmission_impl=transmission,
    )
    yield hc
    hc.close()


@pytest.fixture
def exporter(client: libhoney.Client) -> HoneycombExporter:
    """Exporter sending through the recording client."""
    return HoneycombExporter(client=client)
