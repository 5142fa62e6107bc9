"""
HoneycombExporter - OpenTelemetry SpanExporter that sends spans to Honeycomb.

Every completed span becomes one Honeycomb event, and every event recorded on
the span (an annotation) becomes one more event pointing back at its span.
Batching, retries and transmission are left to libhoney.

Example:
    >>> from opentelemetry import trace
    >>> from opentelemetry.sdk.trace import TracerProvider
    >>> from opentelemetry.sdk.trace.export import BatchSpanProcessor
    >>> from honeytrace.exporters import HoneycombExporter
    >>>
    >>> exporter = HoneycombExporter(writekey="abc123", dataset="my-traces")
    >>> exporter.service_name = "checkout"
    >>> provider = TracerProvider()
    >>> provider.add_span_processor(BatchSpanProcessor(exporter))
    >>> trace.set_tracer_provider(provider)
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import libhoney
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from honeytrace import __version__
from honeytrace.config import DEFAULT_API_HOST, ExporterConfig
from honeytrace.core.events import (
    SERVICE_NAME,
    STATUS_CODE,
    STATUS_DESCRIPTION,
    AnnotationEvent,
    SpanEvent,
    field_value,
    sample_rate_for,
)

logger = logging.getLogger(__name__)

USER_AGENT_ADDITION = f"honeytrace-exporter/{__version__}"


class HoneycombExporter(SpanExporter):
    """OpenTelemetry SpanExporter that uploads spans to Honeycomb.

    Attributes:
        client: The libhoney client events are sent through
        builder: libhoney builder used to create every event
        sample_fraction: Fraction of traces kept by the upstream sampler.
            Set it to the ratio given to TraceIdRatioBased so Honeycomb can
            weight the events. 0 leaves the sample rate untouched.
        service_name: Added to every event as service_name when non-empty.
            Optional, but very valuable once several services send traces.

    Example:
        >>> exporter = HoneycombExporter(
        ...     writekey="abc123",
        ...     dataset="my-traces",
        ...     sample_fraction=0.25,
        ...     service_name="checkout",
        ... )
    """

    def __init__(
        self,
        writekey: str = "",
        dataset: str = "",
        client: Optional[libhoney.Client] = None,
        sample_fraction: float = 1.0,
        service_name: str = "",
        api_host: str = DEFAULT_API_HOST,
        debug: bool = False,
    ) -> None:
        """Initialize the HoneycombExporter.

        Args:
            writekey: Honeycomb write key. Ignored when client is given.
            dataset: Dataset to send trace events to. Ignored when client is given.
            client: Already configured libhoney client. If None, one is created
                and owned by this exporter.
            sample_fraction: Fraction of traces kept upstream (default: 1, no sampling).
            service_name: Value of the service_name field on every event.
            api_host: Honeycomb API host. Ignored when client is given.
            debug: Enable libhoney debug logging. Ignored when client is given.
        """
        if client is None:
            client = libhoney.Client(
                writekey=writekey,
                dataset=dataset,
                api_host=api_host,
                user_agent_addition=USER_AGENT_ADDITION,
                debug=debug,
            )
        self.client = client
        self.builder = client.new_builder()
        self.sample_fraction = sample_fraction
        self.service_name = service_name
        self._closed = False

        logger.info(
            "HoneycombExporter initialized: dataset=%s, sample_fraction=%s, service_name=%s",
            getattr(client, "dataset", dataset),
            self.sample_fraction,
            self.service_name or "<unset>",
        )

    @classmethod
    def from_config(
        cls,
        config: ExporterConfig,
        client: Optional[libhoney.Client] = None,
    ) -> HoneycombExporter:
        """Create an exporter from an ExporterConfig.

        Args:
            config: Validated exporter settings.
            client: Optional libhoney client to use instead of creating one.

        Returns:
            A new HoneycombExporter.
        """
        return cls(
            writekey=config.writekey,
            dataset=config.dataset,
            client=client,
            sample_fraction=config.sample_fraction,
            service_name=config.service_name,
            api_host=config.api_host,
            debug=config.debug,
        )

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        """Export a batch of spans.

        Called by the OpenTelemetry span processor. Each span is sent on its
        own; a span that cannot be converted is logged and skipped.

        Args:
            spans: Sequence of completed spans to export.

        Returns:
            SpanExportResult.SUCCESS, always. Losing telemetry must never
            affect the instrumented application.
        """
        if self._closed:
            logger.warning(
                "HoneycombExporter is closed, dropping %d spans", len(spans)
            )
            return SpanExportResult.SUCCESS

        for span in spans:
            try:
                self.export_span(span)
            except Exception as e:
                logger.error(
                    "Failed to export span '%s' to Honeycomb: %s",
                    getattr(span, "name", "<unknown>"),
                    str(e),
                    exc_info=True,
                )

        return SpanExportResult.SUCCESS

    def export_span(self, span: ReadableSpan) -> None:
        """Send one span, then each of its annotations, to Honeycomb.

        Args:
            span: The completed span.
        """
        fixed = SpanEvent.from_span(span)
        ev = self._new_event()
        if fixed.timestamp is not None:
            ev.created_at = fixed.timestamp
        ev.add(fixed.to_fields())

        self._add_attributes(ev, span.attributes)

        status = span.status
        if status is not None:
            code = _status_code_value(status.status_code)
            if code != 0:
                ev.add_field(STATUS_CODE, code)
            if status.description:
                ev.add_field(STATUS_DESCRIPTION, status.description)

        ev.send_presampled()
        logger.debug(
            "Sent span '%s' (trace %s, span %s)",
            fixed.name,
            fixed.trace_id[:8],
            fixed.span_id,
        )

        for annotation in span.events or ():
            self._export_annotation(span, annotation)

    def _export_annotation(self, span: ReadableSpan, annotation: Any) -> None:
        """Send one span event as a Honeycomb trace annotation.

        Args:
            span: The span the annotation was recorded on.
            annotation: The OpenTelemetry span event.
        """
        fixed = AnnotationEvent.from_annotation(span, annotation)
        ev = self._new_event()
        if fixed.timestamp is not None:
            ev.created_at = fixed.timestamp
        ev.add(fixed.to_fields())

        self._add_attributes(ev, annotation.attributes)

        ev.send_presampled()
        logger.debug(
            "Sent annotation '%s' for span %s", fixed.name, fixed.parent_id
        )

    def _new_event(self) -> libhoney.Event:
        """Create an event carrying the sample rate and service name."""
        ev = self.builder.new_event()
        sample_rate = sample_rate_for(self.sample_fraction)
        if sample_rate is not None:
            ev.sample_rate = sample_rate
        if self.service_name:
            ev.add_field(SERVICE_NAME, self.service_name)
        return ev

    @staticmethod
    def _add_attributes(ev: libhoney.Event, attributes: Optional[Mapping[str, Any]]) -> None:
        if not attributes:
            return
        for key, value in attributes.items():
            ev.add_field(key, field_value(value))

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Ask libhoney to send everything it has queued.

        Args:
            timeout_millis: Unused; libhoney flushes synchronously.

        Returns:
            True once the flush has been requested.
        """
        if not self._closed:
            self.client.flush()
        return True

    def close(self) -> None:
        """Wait for all in-flight events to be sent.

        Call this before the application exits. Exporting after close drops
        the spans.
        """
        if self._closed:
            return
        logger.info("HoneycombExporter closing, waiting for in-flight events...")
        self._closed = True
        self.client.close()
        logger.info("HoneycombExporter closed")

    def shutdown(self) -> None:
        """Shutdown the exporter.

        Blocks until in-flight events are sent.
        """
        self.close()


def _status_code_value(status_code: Any) -> int:
    """Return the integer value of an OpenTelemetry StatusCode."""
    if status_code is None:
        return 0
    return int(getattr(status_code, "value", status_code))
