"""
Response Parser for the Experia Box V10 Exporter
================================================

This module decodes the device's XML status pages into typed measurements.

The pages carry flat, parallel ParaName/ParaValue lists under a
domain-specific root element. Records have no explicit boundaries: DSL
statistics are one name/value pair each, while LAN interfaces are encoded
as consecutive windows of six values.

"""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Optional

from experia_v10_exporter.client.fetcher import DOMAIN_ENDPOINTS
from experia_v10_exporter.exceptions import ExperiaProtocolError
from experia_v10_exporter.models import (
    Domain,
    DomainEndpoints,
    DslMeasurement,
    InterfaceMeasurement,
    Measurement,
    RawRecord,
)

logger = logging.getLogger("experia-v10-exporter")


@dataclass(frozen=True)
class WindowLayout:
    """
    Fixed-stride record layout over a flat value sequence.

    Attributes:
        stride: Number of values per record
        fields: Window offset -> field name, for the offsets that are used
    """

    stride: int
    fields: Mapping[int, str]

    def __post_init__(self) -> None:
        if self.stride < 1:
            raise ValueError("stride must be at least 1")
        out_of_range = [offset for offset in self.fields if not 0 <= offset < self.stride]
        if out_of_range:
            raise ValueError(f"field offsets {out_of_range} outside stride {self.stride}")


# Offsets 3 and 4 exist on the wire but are not exported.
ETHERNET_LAYOUT = WindowLayout(
    stride=6,
    fields={0: "interface_id", 1: "alias", 2: "received", 5: "sent"},
)

INTERFACE_DIRECTIONS = ("received", "sent")


def iter_windows(values: Sequence[str], layout: WindowLayout) -> Iterator[dict[str, str]]:
    """
    Yield one field mapping per complete window.

    A trailing partial window is ignored, so no index past the end of
    values is ever read.
    """
    complete = len(values) - len(values) % layout.stride
    for start in range(0, complete, layout.stride):
        yield {name: values[start + offset] for offset, name in layout.fields.items()}


def parse_number(text: str) -> Optional[float]:
    """Parse a device value as float, None if it is not numeric."""
    # float() also accepts digit group underscores ("1_000")
    if "_" in text:
        return None
    try:
        return float(text.strip())
    except ValueError:
        return None


def extract_raw_record(response_text: str, root_tag: str) -> RawRecord:
    """
    Extract the ParaName/ParaValue sequences below root_tag.

    Raises:
        ExperiaProtocolError: If the body is not well-formed XML
    """
    try:
        root = ET.fromstring(response_text)
    except ET.ParseError as e:
        raise ExperiaProtocolError(
            f"Failed to parse {root_tag} response",
            details={"root_tag": root_tag, "parse_error": str(e), "response": response_text[:200]},
        ) from e

    prefix = "Instance" if root.tag == root_tag else f"{root_tag}/Instance"
    names = [element.text or "" for element in root.findall(f"{prefix}/ParaName")]
    values = [element.text or "" for element in root.findall(f"{prefix}/ParaValue")]

    return RawRecord(names=names, values=values)


class RecordDecoder:
    """Decodes domain XML bodies into measurements."""

    def __init__(
        self,
        endpoints: Mapping[Domain, DomainEndpoints] = DOMAIN_ENDPOINTS,
        interface_layout: WindowLayout = ETHERNET_LAYOUT,
    ):
        self.endpoints = endpoints
        self.interface_layout = interface_layout

    def decode(self, domain: Domain, response_text: str) -> list[Measurement]:
        """
        Decode one domain's data body.

        Raises:
            ExperiaProtocolError: If the body is not well-formed XML
        """
        record = extract_raw_record(response_text, self.endpoints[domain].root_tag)

        if not record.is_aligned:
            logger.warning(
                f"⚠️ {domain.value}: {len(record.names)} names vs {len(record.values)} values, skipping domain"
            )
            return []

        if domain is Domain.DSL:
            measurements: list[Measurement] = list(self.decode_dsl(record))
        else:
            measurements = list(self.decode_interfaces(record))

        logger.debug(f"Decoded {len(measurements)} {domain.value} measurements from {len(record)} values")
        return measurements

    def decode_dsl(self, record: RawRecord) -> Iterator[DslMeasurement]:
        """One measurement per numeric name/value pair, in document order."""
        for name, raw_value in zip(record.names, record.values):
            value = parse_number(raw_value)
            if value is None:
                continue
            yield DslMeasurement(name=name, value=value)

    def decode_interfaces(self, record: RawRecord) -> Iterator[InterfaceMeasurement]:
        """Up to one received and one sent measurement per interface window."""
        if len(record) % self.interface_layout.stride:
            logger.debug(f"Ignoring {len(record) % self.interface_layout.stride} trailing interface values")

        for window in iter_windows(record.values, self.interface_layout):
            for direction in INTERFACE_DIRECTIONS:
                value = parse_number(window[direction])
                if value is None:
                    continue
                yield InterfaceMeasurement(
                    interface_id=window["interface_id"],
                    alias=window["alias"],
                    direction=direction,
                    value=value,
                )


__all__ = [
    "ETHERNET_LAYOUT",
    "RecordDecoder",
    "WindowLayout",
    "extract_raw_record",
    "iter_windows",
    "parse_number",
]
