"""
Exporter Configuration
======================

Configuration is read from EXPERIA_V10_* environment variables and can be
overridden from the command line.

License: MIT
"""

import ipaddress
import logging
import math
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from experia_v10_exporter.exceptions import ExperiaConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "EXPERIA_V10_"

DEFAULT_LISTEN_ADDR = ":9684"
DEFAULT_TIMEOUT = "10s"
DEFAULT_USERNAME = "Admin"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_duration(value: str) -> float:
    """
    Parse a duration such as "10s", "500ms" or "1m30s" into seconds.

    A bare number is taken as seconds.

    Raises:
        ExperiaConfigurationError: If the value is not a positive duration
    """
    text = value.strip()
    seconds: Optional[float] = None

    try:
        seconds = float(text)
    except ValueError:
        position = 0
        total = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != position:
                break
            total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            position = match.end()
        if text and position == len(text):
            seconds = total

    if seconds is None or not math.isfinite(seconds) or seconds <= 0:
        raise ExperiaConfigurationError(
            f"Invalid timeout duration: {value!r}",
            details={"parameter": "timeout", "value": value},
        )
    return seconds


def parse_bool(value: str, parameter: str) -> bool:
    """Parse a boolean flag from an environment value."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ExperiaConfigurationError(
        f"Invalid boolean for {parameter}: {value!r}",
        details={"parameter": parameter, "value": value},
    )


def parse_listen_addr(value: str) -> tuple[str, int]:
    """
    Split a host:port listen address.

    An empty host (":9684") listens on all interfaces.
    """
    host, sep, port_text = value.rpartition(":")
    if not sep:
        raise ExperiaConfigurationError(
            f"Listen address must be host:port, got {value!r}",
            details={"parameter": "listen_addr", "value": value},
        )

    try:
        port = int(port_text)
    except ValueError as e:
        raise ExperiaConfigurationError(
            f"Invalid listen port: {port_text!r}",
            details={"parameter": "listen_addr", "value": value},
        ) from e

    if port < 1 or port > 65535:
        raise ExperiaConfigurationError(
            "Listen port must be between 1 and 65535",
            details={"parameter": "listen_addr", "value": value},
        )

    return host.strip("[]") or "0.0.0.0", port


@dataclass
class ExporterConfig:
    """Validated exporter settings."""

    router_ip: str
    password: str
    username: str = DEFAULT_USERNAME
    timeout: float = 10.0
    listen_addr: str = DEFAULT_LISTEN_ADDR
    emit_zero_counters: bool = False
    strict_scrape: bool = False

    def __post_init__(self) -> None:
        self.validate()

    def __repr__(self) -> str:
        return (
            f"ExporterConfig(router_ip={self.router_ip!r}, username={self.username!r}, "
            f"timeout={self.timeout!r}, listen_addr={self.listen_addr!r}, "
            f"emit_zero_counters={self.emit_zero_counters!r}, strict_scrape={self.strict_scrape!r})"
        )

    def validate(self) -> None:
        """
        Validate settings.

        Raises:
            ExperiaConfigurationError: If a setting is invalid
        """
        try:
            ipaddress.ip_address(self.router_ip)
        except ValueError as e:
            raise ExperiaConfigurationError(
                f"{ENV_PREFIX}ROUTER_IP invalid: {self.router_ip!r}",
                details={"parameter": "router_ip", "value": self.router_ip},
            ) from e

        if not self.password:
            raise ExperiaConfigurationError(
                f"{ENV_PREFIX}ROUTER_PASSWORD is required",
                details={"parameter": "password"},
            )

        if self.timeout <= 0:
            raise ExperiaConfigurationError(
                "Timeout must be greater than 0",
                details={"parameter": "timeout", "value": self.timeout},
            )

        parse_listen_addr(self.listen_addr)

    @property
    def listen_host(self) -> str:
        return parse_listen_addr(self.listen_addr)[0]

    @property
    def listen_port(self) -> int:
        return parse_listen_addr(self.listen_addr)[1]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ExporterConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)
            **overrides: Field values taking precedence over the environment;
                None values are ignored

        Raises:
            ExperiaConfigurationError: If a value is missing or invalid
        """
        env = os.environ if environ is None else environ

        def read(name: str, default: str = "") -> str:
            return env.get(ENV_PREFIX + name, default)

        values = {
            "router_ip": read("ROUTER_IP"),
            "password": read("ROUTER_PASSWORD"),
            "username": read("ROUTER_USERNAME") or DEFAULT_USERNAME,
            "timeout": parse_duration(read("TIMEOUT") or DEFAULT_TIMEOUT),
            "listen_addr": read("LISTEN_ADDR") or DEFAULT_LISTEN_ADDR,
            "emit_zero_counters": parse_bool(read("EMIT_ZERO_COUNTERS"), "emit_zero_counters"),
            "strict_scrape": parse_bool(read("STRICT_SCRAPE"), "strict_scrape"),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        config = cls(**values)
        logger.debug(f"Loaded configuration: {config!r}")
        return config


__all__ = ["ExporterConfig", "parse_bool", "parse_duration", "parse_listen_addr"]
