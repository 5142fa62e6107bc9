"""
honeytrace.cli - Command-line interface for honeytrace.

This module provides a CLI that sends a single test span (with an optional
annotation) to Honeycomb, to check credentials and dataset wiring.

Usage:
    honeytrace [--writekey K] [--dataset D] [--service-name S]
               [--sample-fraction F] [--name N] [--annotation TEXT]
               [--attr key=value ...]

Settings not given on the command line are read from the HONEYCOMB_*
environment variables (see honeytrace.config).

Examples:
    honeytrace --dataset my-traces --name smoke-test
    honeytrace --attr http.status_code=200 --annotation "cache miss"
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List

from honeytrace import __version__
from honeytrace.config import ExporterConfig, env_values
from honeytrace.integrations.setup import get_tracer, setup_tracing, shutdown_tracing

logger = logging.getLogger(__name__)


def parse_args(args: List[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: List of arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="honeytrace",
        description="Send a test OpenTelemetry span to Honeycomb",
        epilog="Example: honeytrace --dataset my-traces --name smoke-test",
    )

    parser.add_argument(
        "--writekey",
        type=str,
        default=None,
        help="Honeycomb write key (defaults to $HONEYCOMB_WRITEKEY)",
    )

    parser.add_argument(
        "--dataset",
        type=str,
        default=None,
        help="Dataset to send the span to (defaults to $HONEYCOMB_DATASET)",
    )

    parser.add_argument(
        "--service-name",
        type=str,
        default=None,
        help="Value of the service_name field (defaults to $HONEYCOMB_SERVICE_NAME)",
    )

    parser.add_argument(
        "--sample-fraction",
        type=float,
        default=None,
        help="Fraction of traces kept upstream (default: 1)",
    )

    parser.add_argument(
        "--api-host",
        type=str,
        default=None,
        help="Honeycomb API host (defaults to $HONEYCOMB_API_HOST)",
    )

    parser.add_argument(
        "-n", "--name",
        type=str,
        default="honeytrace-test",
        help="Name of the test span (default: honeytrace-test)",
    )

    parser.add_argument(
        "--annotation",
        type=str,
        default=None,
        help="Message of an annotation to record on the span",
    )

    parser.add_argument(
        "--attr",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Span attribute, may be repeated",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(args)


def parse_attributes(pairs: List[str]) -> Dict[str, Any]:
    """Parse KEY=VALUE pairs into span attributes.

    Integer, float and true/false values are converted; everything else stays
    a string.

    Args:
        pairs: Strings of the form key=value

    Returns:
        Attribute mapping

    Raises:
        ValueError: If a pair has no '=' or an empty key
    """
    attributes: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {pair!r}")
        attributes[key] = _coerce(raw)
    return attributes


def _coerce(raw: str) -> Any:
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    return raw


def build_config(parsed_args: argparse.Namespace) -> ExporterConfig:
    """Merge command-line options over the environment configuration.

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    values = env_values()
    overrides = {
        "writekey": parsed_args.writekey,
        "dataset": parsed_args.dataset,
        "sample_fraction": parsed_args.sample_fraction,
        "service_name": parsed_args.service_name,
        "api_host": parsed_args.api_host,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    values["debug"] = values["debug"] or parsed_args.verbose
    return ExporterConfig(**values)


def send_test_span(
    config: ExporterConfig,
    name: str,
    attributes: Dict[str, Any],
    annotation: str | None = None,
) -> None:
    """Send one span through a freshly configured tracer, then flush.

    Args:
        config: Exporter settings
        name: Span name
        attributes: Span attributes
        annotation: Optional annotation message recorded on the span
    """
    setup_tracing(
        writekey=config.writekey,
        dataset=config.dataset,
        service_name=config.service_name,
        sample_fraction=config.sample_fraction,
        api_host=config.api_host,
        use_batch_processor=False,
        debug=config.debug,
    )
    tracer = get_tracer("honeytrace.cli", __version__)
    try:
        with tracer.start_as_current_span(name, attributes=attributes) as span:
            if annotation:
                span.add_event(annotation)
    finally:
        shutdown_tracing()


def main(args: List[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parsed_args = parse_args(args)

    if parsed_args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = build_config(parsed_args)
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        attributes = parse_attributes(parsed_args.attr)
    except ValueError as e:
        print(f"Error: Invalid attribute: {e}", file=sys.stderr)
        return 2

    try:
        send_test_span(config, parsed_args.name, attributes, parsed_args.annotation)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 4

    if parsed_args.verbose:
        print(
            f"Sent span '{parsed_args.name}' to dataset '{config.dataset}'",
            file=sys.stderr,
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())
