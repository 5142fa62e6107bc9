"""
FastAPI integration for sending request traces to Honeycomb.

This module instruments a FastAPI application so that every request produces
a trace, and every span of that trace is sent to Honeycomb.

Example:
    >>> from fastapi import FastAPI
    >>> from honeytrace.integrations import setup_fastapi_tracing
    >>>
    >>> app = FastAPI()
    >>>
    >>> setup_fastapi_tracing(
    ...     app,
    ...     writekey="abc123",
    ...     dataset="my-traces",
    ...     service_name="my-api",
    ... )
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import libhoney

from honeytrace.config import DEFAULT_API_HOST
from honeytrace.integrations.setup import setup_tracing, shutdown_tracing

logger = logging.getLogger(__name__)


def setup_fastapi_tracing(
    app,  # FastAPI app - type hint omitted to avoid import
    writekey: str,
    dataset: str,
    service_name: str,
    sample_fraction: float = 1.0,
    api_host: str = DEFAULT_API_HOST,
    excluded_urls: Optional[str] = None,
    additional_exporters: Optional[list] = None,
    client: Optional[libhoney.Client] = None,
) -> None:
    """Setup automatic Honeycomb tracing for a FastAPI application.

    Args:
        app: The FastAPI application instance.
        writekey: Honeycomb write key.
        dataset: Dataset to send trace events to.
        service_name: Name of the service, sent as service_name on every event.
        sample_fraction: Fraction of traces to keep (default: 1, keep all).
        api_host: Honeycomb API host.
        excluded_urls: Comma separated URL patterns to exclude from tracing.
        additional_exporters: Additional SpanExporters to use alongside Honeycomb.
        client: Optional libhoney client to send events through.

    Raises:
        ImportError: If opentelemetry-instrumentation-fastapi is not installed.

    Example:
        >>> setup_fastapi_tracing(
        ...     app,
        ...     writekey="abc123",
        ...     dataset="my-traces",
        ...     service_name="user-api",
        ...     excluded_urls="/health,/metrics",  # Don't trace health checks
        ... )
    """
    provider = setup_tracing(
        writekey=writekey,
        dataset=dataset,
        service_name=service_name,
        sample_fraction=sample_fraction,
        api_host=api_host,
        additional_exporters=additional_exporters,
        client=client,
    )

    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    except ImportError:
        logger.warning(
            "opentelemetry-instrumentation-fastapi not installed. "
            "Install with: pip install honeytrace[fastapi]"
        )
        raise ImportError(
            "FastAPI instrumentation requires additional dependencies. "
            "Install with: pip install honeytrace[fastapi]"
        ) from None

    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls=excluded_urls,
        tracer_provider=provider,
    )
    logger.info(
        "FastAPI auto-instrumentation enabled for service '%s'",
        service_name,
    )

    # Drain libhoney when the application shuts down
    app.router.lifespan_context = _with_tracing_shutdown(app.router.lifespan_context)


def _with_tracing_shutdown(lifespan_context):
    """Wrap an application lifespan so that tracing is shut down after it."""

    @asynccontextmanager
    async def lifespan(app):
        try:
            async with lifespan_context(app) as state:
                yield state
        finally:
            shutdown_tracing()
            logger.info("Honeycomb tracing shut down with the application")

    return lifespan

