"""
OpenTelemetry tracing setup with HoneycombExporter.

This module provides functions to configure OpenTelemetry tracing so that
every completed span is sent to Honeycomb.

Example:
    >>> from honeytrace.integrations import setup_tracing, get_tracer
    >>>
    >>> # Setup tracing, keeping one trace in four
    >>> setup_tracing(
    ...     writekey="abc123",
    ...     dataset="my-traces",
    ...     service_name="my-service",
    ...     sample_fraction=0.25,
    ... )
    >>>
    >>> # Get a tracer and create spans
    >>> tracer = get_tracer("my-module")
    >>> with tracer.start_as_current_span("my-operation") as span:
    ...     # Your code here
    ...     span.set_attribute("user.id", "123")
"""

from __future__ import annotations

import logging
from typing import Optional

import libhoney
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SimpleSpanProcessor,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, Sampler, TraceIdRatioBased

from honeytrace.config import DEFAULT_API_HOST, ExporterConfig
from honeytrace.exporters import HoneycombExporter

logger = logging.getLogger(__name__)

# Global reference to the configured provider
_tracer_provider: Optional[TracerProvider] = None


def build_sampler(sample_fraction: float) -> Optional[Sampler]:
    """Return the sampler matching a sample fraction.

    Root spans are kept with probability sample_fraction and children follow
    their parent. No sampler is needed when everything is kept (1) or when no
    sample rate is reported (0).

    Args:
        sample_fraction: Fraction of traces to keep.

    Returns:
        A ParentBased(TraceIdRatioBased) sampler, or None for the SDK default.
    """
    if 0 < sample_fraction < 1:
        return ParentBased(root=TraceIdRatioBased(sample_fraction))
    return None


def setup_tracing(
    writekey: str,
    dataset: str,
    service_name: str = "",
    sample_fraction: float = 1.0,
    api_host: str = DEFAULT_API_HOST,
    use_batch_processor: bool = True,
    additional_exporters: Optional[list[SpanExporter]] = None,
    client: Optional[libhoney.Client] = None,
    debug: bool = False,
) -> TracerProvider:
    """Setup OpenTelemetry tracing with HoneycombExporter.

    This function configures the global TracerProvider with a sampler and a
    HoneycombExporter that agree on the sample fraction, so Honeycomb can
    weight the events it receives.

    Args:
        writekey: Honeycomb write key.
        dataset: Dataset to send trace events to.
        service_name: Name of the service, used as the resource service.name
            and the service_name field of every event.
        sample_fraction: Fraction of traces to keep (default: 1, keep all).
        api_host: Honeycomb API host.
        use_batch_processor: Use BatchSpanProcessor (True) or SimpleSpanProcessor.
        additional_exporters: Additional SpanExporters to use alongside Honeycomb.
        client: Optional libhoney client to send events through.
        debug: Enable libhoney debug logging.

    Returns:
        The configured TracerProvider.

    Raises:
        ValueError: If the dataset is empty or sample_fraction is out of range.

    Example:
        >>> provider = setup_tracing(
        ...     writekey="abc123",
        ...     dataset="my-traces",
        ...     service_name="user-api",
        ... )
    """
    global _tracer_provider

    config = ExporterConfig(
        writekey=writekey,
        dataset=dataset,
        sample_fraction=sample_fraction,
        service_name=service_name,
        api_host=api_host,
        debug=debug,
    )

    # Create resource with service name
    attributes = {SERVICE_NAME: service_name} if service_name else {}
    resource = Resource.create(attributes)

    # Create tracer provider
    sampler = build_sampler(sample_fraction)
    if sampler is not None:
        provider = TracerProvider(resource=resource, sampler=sampler)
    else:
        provider = TracerProvider(resource=resource)

    honeycomb_exporter = HoneycombExporter.from_config(config, client=client)

    # Add span processor
    if use_batch_processor:
        processor = BatchSpanProcessor(honeycomb_exporter)
    else:
        processor = SimpleSpanProcessor(honeycomb_exporter)

    provider.add_span_processor(processor)

    # Add any additional exporters
    if additional_exporters:
        for exporter in additional_exporters:
            if use_batch_processor:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            else:
                provider.add_span_processor(SimpleSpanProcessor(exporter))

    # Set as global provider
    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    logger.info(
        "Tracing configured: dataset=%s, service=%s, sample_fraction=%s",
        dataset,
        service_name or "<unset>",
        sample_fraction,
    )

    return provider


def get_tracer(name: str, version: Optional[str] = None) -> trace.Tracer:
    """Get a tracer instance.

    This is a convenience function to get a tracer from the configured provider.

    Args:
        name: Name of the tracer (usually module name).
        version: Optional version of the tracer.

    Returns:
        A Tracer instance for creating spans.
    """
    provider = _tracer_provider or trace.get_tracer_provider()
    return provider.get_tracer(name, version)


def shutdown_tracing() -> None:
    """Shutdown the tracing system.

    Flushes all pending spans, then waits for libhoney to send them.
    Call this on application shutdown so no trace events are dropped.
    """
    global _tracer_provider

    if _tracer_provider:
        logger.info("Shutting down tracing...")
        _tracer_provider.shutdown()
        _tracer_provider = None
        logger.info("Tracing shutdown complete")
