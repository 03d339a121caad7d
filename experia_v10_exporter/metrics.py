"""
Metric Emitter for the Experia Box V10 Exporter
===============================================

Maps decoded measurements to named, labeled counter samples and groups them
into prometheus_client metric families.

The device reports cumulative values, so every emitted measurement uses the
counter type.

"""

from collections.abc import Iterable, Iterator

from prometheus_client.core import CounterMetricFamily

from experia_v10_exporter.models import DslMeasurement, InterfaceMeasurement, Measurement, MetricSample

METRIC_PREFIX = "experia_v10_"

DSL_METRIC = METRIC_PREFIX + "dsl"
INTERFACE_RECEIVED_METRIC = METRIC_PREFIX + "interface_received_bytes"
INTERFACE_SENT_METRIC = METRIC_PREFIX + "interface_sent_bytes"

METRIC_DOCUMENTATION = {
    DSL_METRIC: "All dsl related metadata.",
    INTERFACE_RECEIVED_METRIC: "The total number of bytes received on the interface",
    INTERFACE_SENT_METRIC: "The total number of bytes transmitted out of the interface",
}

METRIC_LABELS = {
    DSL_METRIC: ("name",),
    INTERFACE_RECEIVED_METRIC: ("id", "alias"),
    INTERFACE_SENT_METRIC: ("id", "alias"),
}

_INTERFACE_METRICS = {
    "received": INTERFACE_RECEIVED_METRIC,
    "sent": INTERFACE_SENT_METRIC,
}


def _sample(name: str, labels: tuple[tuple[str, str], ...], value: float) -> MetricSample:
    return MetricSample(name=name, documentation=METRIC_DOCUMENTATION[name], labels=labels, value=value)


def emit_measurements(measurements: Iterable[Measurement], emit_zero_counters: bool = False) -> list[MetricSample]:
    """
    Convert measurements to metric samples.

    Args:
        measurements: Decoded DSL and interface measurements
        emit_zero_counters: Keep interface counters that are not positive

    Returns:
        One sample per exported measurement, in input order
    """
    samples = []
    for measurement in measurements:
        if isinstance(measurement, DslMeasurement):
            samples.append(_sample(DSL_METRIC, (("name", measurement.name),), measurement.value))
        elif isinstance(measurement, InterfaceMeasurement):
            if measurement.value <= 0 and not emit_zero_counters:
                continue
            samples.append(
                _sample(
                    _INTERFACE_METRICS[measurement.direction],
                    (("id", measurement.interface_id), ("alias", measurement.alias)),
                    measurement.value,
                )
            )
        else:
            raise TypeError(f"Unsupported measurement type: {type(measurement).__name__}")
    return samples


def describe_metric_families() -> Iterator[CounterMetricFamily]:
    """Yield empty families for every measurement metric."""
    for name, documentation in METRIC_DOCUMENTATION.items():
        yield CounterMetricFamily(name, documentation, labels=METRIC_LABELS[name])


def build_metric_families(samples: Iterable[MetricSample]) -> list[CounterMetricFamily]:
    """Group samples by metric name into counter families, first-seen order."""
    families: dict[str, CounterMetricFamily] = {}
    for sample in samples:
        family = families.get(sample.name)
        if family is None:
            family = CounterMetricFamily(sample.name, sample.documentation, labels=sample.label_names)
            families[sample.name] = family
        family.add_metric(sample.label_values, sample.value)
    return list(families.values())


__all__ = [
    "DSL_METRIC",
    "INTERFACE_RECEIVED_METRIC",
    "INTERFACE_SENT_METRIC",
    "METRIC_PREFIX",
    "build_metric_families",
    "describe_metric_families",
    "emit_measurements",
]
