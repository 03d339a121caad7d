"""
Command Line Argument Parsing Module

This module defines the exporter's command-line interface. Every option
falls back to its EXPERIA_V10_* environment variable when omitted.

License: MIT
"""

import argparse
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Prometheus exporter for the KPN Experia Box V10",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --router-ip 192.168.2.254 --password "your_password"
  EXPERIA_V10_ROUTER_IP=192.168.2.254 EXPERIA_V10_ROUTER_PASSWORD=secret %(prog)s
  %(prog)s --router-ip 192.168.2.254 --password "password" --once

Environment:
  EXPERIA_V10_LISTEN_ADDR, EXPERIA_V10_TIMEOUT, EXPERIA_V10_ROUTER_IP,
  EXPERIA_V10_ROUTER_USERNAME, EXPERIA_V10_ROUTER_PASSWORD,
  EXPERIA_V10_EMIT_ZERO_COUNTERS, EXPERIA_V10_STRICT_SCRAPE
  Command-line options take precedence over the environment.

Scraping:
  Every request to /metrics logs in to the device, reads the DSL and LAN
  status pages and logs out again. Requests are served one at a time.
        """,
    )

    # Connection settings
    parser.add_argument("--router-ip", help="Experia Box IP address")
    parser.add_argument("--username", help="Router login username (default: Admin)")
    parser.add_argument("--password", help="Router login password")
    parser.add_argument(
        "--timeout",
        help="Per-request timeout, e.g. 10s or 500ms (default: 10s)",
    )

    # Exporter settings
    parser.add_argument("--listen-addr", help="host:port to serve metrics on (default: :9684)")
    parser.add_argument(
        "--emit-zero-counters",
        action="store_true",
        default=None,
        help="Also export interface byte counters that are 0",
    )
    parser.add_argument(
        "--strict-scrape",
        action="store_true",
        default=None,
        help="Stop a scrape at the first failing status page",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Poll the router once, print the metrics to stdout and exit",
    )

    # Output options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging output to stderr",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    validate_args(args)

    return args


def validate_args(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Raises:
        ValueError: If arguments are invalid
    """
    if args.debug and args.quiet:
        raise ValueError("--debug and --quiet are mutually exclusive")

    if args.password is not None and not args.password:
        raise ValueError("Password cannot be empty")

    logger.debug("Arguments validated successfully")
