"""
Experia Box V10 Exporter
========================

Prometheus exporter for the KPN Experia Box V10.

Every scrape logs in to the router's web interface, reads the DSL line
statistics and the LAN interface byte counters, and logs out again.

Quick Start:
    >>> from prometheus_client import CollectorRegistry, generate_latest
    >>> from experia_v10_exporter import ExperiaV10Client, ExperiaV10Collector
    >>> client = ExperiaV10Client(host="192.168.2.254", password="your_password")
    >>> registry = CollectorRegistry()
    >>> registry.register(ExperiaV10Collector(client))
    >>> print(generate_latest(registry).decode())

Error Handling:
    Device failures never escape a scrape. They are counted in
    experia_v10_auth_errors_total / experia_v10_scrape_errors_total and
    reflected in experia_v10_up. Using the client directly raises:

    >>> from experia_v10_exporter import ExperiaAuthenticationError
    >>> try:
    ...     client.login()
    ... except ExperiaAuthenticationError as e:
    ...     print(f"Authentication failed: {e}")

This is an unofficial exporter not affiliated with KPN.

License: MIT
"""

from .client.main import ExperiaV10Client
from .collector import ExperiaV10Collector
from .exceptions import (
    ExperiaAuthenticationError,
    ExperiaConfigurationError,
    ExperiaError,
    ExperiaProtocolError,
    ExperiaTimeoutError,
    ExperiaTransportError,
)
from .models import Domain, DslMeasurement, InterfaceMeasurement, MetricSample, RawRecord

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    "Domain",
    "DslMeasurement",
    "ExperiaAuthenticationError",
    "ExperiaConfigurationError",
    "ExperiaError",
    "ExperiaProtocolError",
    "ExperiaTimeoutError",
    "ExperiaTransportError",
    "ExperiaV10Client",
    "ExperiaV10Collector",
    "InterfaceMeasurement",
    "MetricSample",
    "RawRecord",
    "__license__",
    "__version__",
]
