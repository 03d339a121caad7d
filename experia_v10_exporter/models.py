"""
Data Models for the Experia Box V10 Exporter
============================================

This module contains the dataclasses passed between the pipeline stages.

"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from experia_v10_exporter.exceptions import ExperiaError


class Domain(str, Enum):
    """Data categories fetched from the device on every poll."""

    DSL = "dsl"
    ETHERNET = "ethernet"


@dataclass(frozen=True)
class DomainEndpoints:
    """Device pages backing one domain."""

    priming_path: str
    data_path: str
    root_tag: str


@dataclass
class RawRecord:
    """
    Parallel name/value sequences extracted from one XML response.

    The device does not delimit records; grouping is positional and is
    applied by the decoder.
    """

    names: list[str] = field(default_factory=list)
    values: list[str] = field(default_factory=list)

    @property
    def is_aligned(self) -> bool:
        """True when names and values can be paired by index."""
        return len(self.names) == len(self.values)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class DslMeasurement:
    """One numeric DSL line statistic."""

    name: str
    value: float


@dataclass(frozen=True)
class InterfaceMeasurement:
    """
    One byte counter of one LAN interface.

    Attributes:
        interface_id: Device interface identifier (e.g. "eth0")
        alias: Human-readable port name (e.g. "LAN1")
        direction: "received" or "sent"
        value: Cumulative byte count
    """

    interface_id: str
    alias: str
    direction: str
    value: float


Measurement = Union[DslMeasurement, InterfaceMeasurement]


@dataclass
class ScrapeResult:
    """Measurements and per-domain failures of one scrape."""

    measurements: list[Measurement] = field(default_factory=list)
    errors: dict[Domain, ExperiaError] = field(default_factory=dict)
    attempted: list[Domain] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class MetricSample:
    """A named, labeled counter value handed to the exposition layer."""

    name: str
    documentation: str
    labels: tuple[tuple[str, str], ...]
    value: float

    @property
    def label_names(self) -> list[str]:
        return [name for name, _ in self.labels]

    @property
    def label_values(self) -> list[str]:
        return [value for _, value in self.labels]


__all__ = [
    "Domain",
    "DomainEndpoints",
    "DslMeasurement",
    "InterfaceMeasurement",
    "Measurement",
    "MetricSample",
    "RawRecord",
    "ScrapeResult",
]
