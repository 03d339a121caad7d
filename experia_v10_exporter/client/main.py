"""
Main Experia Box V10 Client
===========================

This module ties the pipeline stages together: login, per-domain fetch and
decode, and a logout that is guaranteed once a login has succeeded.

"""

import logging
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Optional

import requests

from experia_v10_exporter.client.auth import LoginAuthenticator
from experia_v10_exporter.client.fetcher import PageFetcher
from experia_v10_exporter.client.http import DeviceSession
from experia_v10_exporter.client.parser import RecordDecoder
from experia_v10_exporter.exceptions import ExperiaProtocolError, ExperiaTransportError
from experia_v10_exporter.models import Domain, Measurement, ScrapeResult

logger = logging.getLogger("experia-v10-exporter")


class ExperiaV10Client:
    """
    Client for the Experia Box V10 web interface.

    One client owns one DeviceSession. Calls must not overlap: the device
    keeps a single login per credential and the cookie store is unlocked.

    Examples:
        >>> client = ExperiaV10Client(host="192.168.2.254", password="secret")
        >>> with client.authenticated_session():
        ...     result = client.scrape()
    """

    def __init__(
        self,
        host: str,
        password: str,
        username: str = "Admin",
        timeout: float = 10.0,
        strict_scrape: bool = False,
        domains: Sequence[Domain] = (Domain.DSL, Domain.ETHERNET),
        http: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            host: Device IP address
            password: Static login secret
            username: Login username (default: "Admin")
            timeout: Per-call timeout in seconds (default: 10.0)
            strict_scrape: Stop at the first failing domain (default: False)
            domains: Domains scraped per poll, in order
            http: Optional pre-built requests Session
        """
        self.session = DeviceSession(host, username, password, timeout=timeout, http=http)
        self.strict_scrape = strict_scrape
        self.domains = tuple(domains)

        self.authenticator = LoginAuthenticator()
        self.fetcher = PageFetcher()
        self.decoder = RecordDecoder()

        logger.info(f"🛡️ ExperiaV10Client initialized for {host} (timeout {timeout}s)")

    @property
    def host(self) -> str:
        return self.session.host

    def login(self) -> None:
        """Start from an empty cookie store and log in."""
        self.session.reset_cookies()
        self.authenticator.login(self.session)

    def logout(self) -> None:
        """Log out best-effort; never raises."""
        self.authenticator.logout(self.session)

    @contextmanager
    def authenticated_session(self) -> Iterator[DeviceSession]:
        """
        Hold a logged-in session for the duration of the block.

        Login errors propagate before the block runs and no logout is
        attempted. Once logged in, logout runs on every exit path.
        """
        self.login()
        try:
            yield self.session
        finally:
            self.logout()

    def scrape_domain(self, domain: Domain) -> list[Measurement]:
        """Fetch and decode one domain."""
        return self.decoder.decode(domain, self.fetcher.fetch(self.session, domain))

    def scrape(self) -> ScrapeResult:
        """
        Scrape every domain from the logged-in session.

        Transport and protocol failures are recorded per domain. Unless
        strict_scrape is set, the remaining domains are still attempted.
        """
        start_time = time.time()
        result = ScrapeResult()

        for domain in self.domains:
            result.attempted.append(domain)
            try:
                result.measurements.extend(self.scrape_domain(domain))
            except (ExperiaTransportError, ExperiaProtocolError) as e:
                logger.error(f"❌ {domain.value} scrape failed: {e}")
                result.errors[domain] = e
                if self.strict_scrape:
                    break

        logger.info(
            f"✅ Scraped {len(result.measurements)} measurements in {time.time() - start_time:.2f}s "
            f"({len(result.attempted) - len(result.errors)}/{len(result.attempted)} domains)"
        )
        return result

    def close(self) -> None:
        """Clean up resources."""
        self.session.close()

    def __enter__(self) -> "ExperiaV10Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["ExperiaV10Client"]
