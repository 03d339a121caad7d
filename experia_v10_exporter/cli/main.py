"""
Main CLI Orchestration Module

This module provides the exporter's entry point: it builds the
configuration, the device client and the Prometheus registry, then either
serves /metrics or performs a single poll.

License: MIT
"""

import logging
import sys
from typing import Optional

from prometheus_client import CollectorRegistry, generate_latest

from experia_v10_exporter import ExperiaV10Client, ExperiaV10Collector, __version__
from experia_v10_exporter.config import ExporterConfig, parse_duration
from experia_v10_exporter.exceptions import ExperiaConfigurationError
from experia_v10_exporter.server import create_app, serve

from .args import parse_args
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)


def build_config(args) -> ExporterConfig:
    """Merge command-line options over the environment."""
    return ExporterConfig.from_env(
        router_ip=args.router_ip,
        username=args.username,
        password=args.password,
        timeout=parse_duration(args.timeout) if args.timeout else None,
        listen_addr=args.listen_addr,
        emit_zero_counters=args.emit_zero_counters,
        strict_scrape=args.strict_scrape,
    )


def build_registry(config: ExporterConfig) -> tuple[CollectorRegistry, ExperiaV10Client]:
    """Create the client and a registry holding its collector."""
    client = ExperiaV10Client(
        host=config.router_ip,
        username=config.username,
        password=config.password,
        timeout=config.timeout,
        strict_scrape=config.strict_scrape,
    )
    registry = CollectorRegistry()
    registry.register(ExperiaV10Collector(client, emit_zero_counters=config.emit_zero_counters))
    return registry, client


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the CLI application."""
    try:
        args = parse_args(argv)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(debug=args.debug, quiet=args.quiet, log_file=args.log_file)

    try:
        config = build_config(args)
    except ExperiaConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info(f"Experia V10 Exporter v{__version__} for {config.router_ip}")

    registry, client = build_registry(config)

    with client:
        if args.once:
            sys.stdout.write(generate_latest(registry).decode("utf-8"))
            return

        try:
            serve(create_app(registry), config.listen_host, config.listen_port)
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
