"""
honeytrace.config - Exporter configuration.

The exporter needs a Honeycomb write key and a dataset. Everything else has a
sensible default. Configuration can be built directly or read from the
environment, which is what the CLI does.

Environment variables:
    HONEYCOMB_WRITEKEY: Honeycomb write key (API key)
    HONEYCOMB_DATASET: Dataset receiving the trace events
    HONEYCOMB_SAMPLE_FRACTION: Fraction of traces kept upstream (default: 1)
    HONEYCOMB_SERVICE_NAME: Value of the service_name field (falls back to
        OTEL_SERVICE_NAME)
    HONEYCOMB_API_HOST: Ingestion API host
    HONEYCOMB_DEBUG: Enable libhoney debug logging ("1", "true", "yes")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

DEFAULT_API_HOST = "https://api.honeycomb.io"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ExporterConfig:
    """Settings for a HoneycombExporter.

    Attributes:
        writekey: Honeycomb write key (also known as the API key)
        dataset: Name of the dataset to send trace events to
        sample_fraction: Fraction of traces kept by the upstream sampler.
            0 means "do not set a sample rate on events".
        service_name: Added to every event as service_name when non-empty
        api_host: Honeycomb ingestion API host
        debug: Whether libhoney should log its activity
    """
    writekey: str
    dataset: str
    sample_fraction: float = 1.0
    service_name: str = ""
    api_host: str = DEFAULT_API_HOST
    debug: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values after initialization."""
        if not self.dataset:
            raise ValueError("dataset cannot be empty")
        if not 0 <= self.sample_fraction <= 1:
            raise ValueError(
                f"sample_fraction must be between 0 and 1, got {self.sample_fraction}"
            )
        if not self.api_host:
            raise ValueError("api_host cannot be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ExporterConfig:
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Validated ExporterConfig

        Raises:
            ValueError: If the dataset is missing or a value is malformed
        """
        return cls(**env_values(environ))


def env_values(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read the HONEYCOMB_* settings without validating them.

    Used by from_env and by callers that lay their own overrides on top
    before building an ExporterConfig.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Keyword arguments for ExporterConfig

    Raises:
        ValueError: If HONEYCOMB_SAMPLE_FRACTION is not a number
    """
    env = os.environ if environ is None else environ

    raw_fraction = env.get("HONEYCOMB_SAMPLE_FRACTION", "1")
    try:
        sample_fraction = float(raw_fraction)
    except ValueError:
        raise ValueError(
            f"HONEYCOMB_SAMPLE_FRACTION is not a number: {raw_fraction!r}"
        ) from None

    return {
        "writekey": env.get("HONEYCOMB_WRITEKEY", ""),
        "dataset": env.get("HONEYCOMB_DATASET", ""),
        "sample_fraction": sample_fraction,
        "service_name": env.get(
            "HONEYCOMB_SERVICE_NAME", env.get("OTEL_SERVICE_NAME", "")
        ),
        "api_host": env.get("HONEYCOMB_API_HOST", DEFAULT_API_HOST),
        "debug": env.get("HONEYCOMB_DEBUG", "").strip().lower() in _TRUTHY,
    }
