"""
honeytrace.integrations - Wiring HoneycombExporter into applications.

This subpackage sets up the OpenTelemetry SDK with HoneycombExporter and
instruments FastAPI applications.

Example (FastAPI):
    >>> from fastapi import FastAPI
    >>> from honeytrace.integrations import setup_fastapi_tracing
    >>>
    >>> app = FastAPI()
    >>> setup_fastapi_tracing(
    ...     app, writekey="abc123", dataset="my-traces", service_name="my-api"
    ... )
"""

from honeytrace.integrations.fastapi_integration import setup_fastapi_tracing
from honeytrace.integrations.setup import (
    build_sampler,
    setup_tracing,
    get_tracer,
    shutdown_tracing,
)

__all__ = [
    "setup_fastapi_tracing",
    "setup_tracing",
    "build_sampler",
    "get_tracer",
    "shutdown_tracing",
]
