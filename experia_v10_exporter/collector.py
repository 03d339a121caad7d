"""
Prometheus Collector for the Experia Box V10
============================================

Runs one poll per collect() call and yields the measurement families plus
the collector's own health metrics.

No exception from the device pipeline escapes collect(): failures are
counted and reflected in the up gauge.

"""

import logging
from collections.abc import Iterator

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from prometheus_client.metrics_core import Metric

from experia_v10_exporter.client.main import ExperiaV10Client
from experia_v10_exporter.exceptions import ExperiaError
from experia_v10_exporter.metrics import (
    METRIC_PREFIX,
    build_metric_families,
    describe_metric_families,
    emit_measurements,
)
from experia_v10_exporter.models import MetricSample

logger = logging.getLogger("experia-v10-exporter")

UP_METRIC = METRIC_PREFIX + "up"
AUTH_ERRORS_METRIC = METRIC_PREFIX + "auth_errors"
SCRAPE_ERRORS_METRIC = METRIC_PREFIX + "scrape_errors"

UP_DOCUMENTATION = "Shows if the Experia Box V10 is deemed up by the collector."
AUTH_ERRORS_DOCUMENTATION = "Counts number of authentication errors encountered by the collector."
SCRAPE_ERRORS_DOCUMENTATION = "Counts the number of scrape errors by this collector."


class ExperiaV10Collector:
    """Custom collector that polls the device when /metrics is scraped."""

    def __init__(self, client: ExperiaV10Client, emit_zero_counters: bool = False):
        """
        Initialize the collector.

        Args:
            client: Client owning the device session
            emit_zero_counters: Export interface counters that are not positive
        """
        self.client = client
        self.emit_zero_counters = emit_zero_counters

        # Process lifetime counts, exposed as plain metric families
        self.up = 0
        self.auth_errors = 0
        self.scrape_errors = 0

    def describe(self) -> Iterator[Metric]:
        yield GaugeMetricFamily(UP_METRIC, UP_DOCUMENTATION)
        yield CounterMetricFamily(AUTH_ERRORS_METRIC, AUTH_ERRORS_DOCUMENTATION)
        yield CounterMetricFamily(SCRAPE_ERRORS_METRIC, SCRAPE_ERRORS_DOCUMENTATION)
        yield from describe_metric_families()

    def poll(self) -> list[MetricSample]:
        """
        Run one login, scrape, logout cycle and update the health metrics.

        Returns:
            Samples of every successfully decoded domain
        """
        try:
            with self.client.authenticated_session():
                result = self.client.scrape()
        except ExperiaError as e:
            logger.error(f"Error during authentication: {type(e).__name__}: {e}")
            self.auth_errors += 1
            self.up = 0
            return []

        if result.ok:
            self.up = 1
        else:
            failed = ", ".join(domain.value for domain in result.errors)
            logger.error(f"Error during scrape: {failed} failed")
            self.scrape_errors += 1
            self.up = 0

        return emit_measurements(result.measurements, emit_zero_counters=self.emit_zero_counters)

    def health_metric_families(self) -> list[Metric]:
        """Current up gauge and error counters."""
        return [
            GaugeMetricFamily(UP_METRIC, UP_DOCUMENTATION, value=self.up),
            CounterMetricFamily(AUTH_ERRORS_METRIC, AUTH_ERRORS_DOCUMENTATION, value=self.auth_errors),
            CounterMetricFamily(SCRAPE_ERRORS_METRIC, SCRAPE_ERRORS_DOCUMENTATION, value=self.scrape_errors),
        ]

    def collect(self) -> Iterator[Metric]:
        yield from build_metric_families(self.poll())
        yield from self.health_metric_families()


__all__ = ["ExperiaV10Collector"]
