"""
HTTP Session Handling for the Experia Box V10 Exporter
======================================================

This module owns the connection to the device: one requests Session, one
cookie jar per poll and one fixed timeout for every call.

The device keeps login state server-side keyed on cookies, so the cookie
jar is replaced (never just cleared) between polls.

"""

import logging
from contextlib import closing
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from requests.cookies import RequestsCookieJar
from urllib3.util.retry import Retry

from experia_v10_exporter.exceptions import wrap_transport_error

logger = logging.getLogger("experia-v10-exporter")


def create_device_http_session() -> requests.Session:
    """
    Create a requests Session configured for the Experia Box.

    Retries are disabled at the urllib3 level: a failed call fails the poll
    and the next scrape is the retry.

    Returns:
        requests.Session with a single small connection pool
    """
    session = requests.Session()

    adapter = HTTPAdapter(
        pool_connections=1,
        pool_maxsize=1,
        max_retries=Retry(total=0, read=False),
        pool_block=False,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update(
        {
            "User-Agent": "ExperiaV10Exporter/1.0.0",
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        }
    )

    logger.debug("🔧 Created device HTTP session")
    return session


class DeviceSession:
    """
    Authenticated-state container for one device.

    Holds the device address, the credential pair and the cookie store.
    Not thread-safe: polls must be serialized by the caller.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ):
        """
        Initialize the device session.

        Args:
            host: Device IP address or hostname
            username: Login username
            password: Static login secret
            timeout: Per-call timeout in seconds
            http: Optional pre-built requests Session
        """
        self.host = host
        self.username = username
        self.password = password
        self.timeout = timeout
        self.base_url = f"http://{host}"
        self.http = http or create_device_http_session()

    def __repr__(self) -> str:
        return f"DeviceSession(host={self.host!r}, username={self.username!r}, timeout={self.timeout!r})"

    @property
    def cookies(self) -> RequestsCookieJar:
        return self.http.cookies

    def url_for(self, path: str) -> str:
        """Build an absolute device URL for a path."""
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def get(self, path: str) -> str:
        """
        GET a device page and return its body.

        Raises:
            ExperiaTransportError: On network failure
            ExperiaTimeoutError: When the timeout is exceeded
        """
        url = self.url_for(path)
        logger.debug(f"📤 GET {path}")

        try:
            with closing(self.http.get(url, timeout=self.timeout)) as response:
                body = str(response.text)
                logger.debug(f"📥 {response.status_code} {path}: {len(body)} chars")
                return body
        except requests.exceptions.RequestException as e:
            raise wrap_transport_error(e, url, self.timeout) from e

    def post_form(self, path: str, fields: dict[str, str]) -> str:
        """
        POST an url-encoded form and return the response body.

        Raises:
            ExperiaTransportError: On network failure
            ExperiaTimeoutError: When the timeout is exceeded
        """
        url = self.url_for(path)
        logger.debug(f"📤 POST {path} ({', '.join(sorted(fields))})")

        try:
            with closing(self.http.post(url, data=fields, timeout=self.timeout)) as response:
                body = str(response.text)
                logger.debug(f"📥 {response.status_code} {path}: {len(body)} chars")
                return body
        except requests.exceptions.RequestException as e:
            raise wrap_transport_error(e, url, self.timeout) from e

    def reset_cookies(self) -> None:
        """Replace the cookie store with a fresh, empty one."""
        self.http.cookies = RequestsCookieJar()
        logger.debug("🍪 Cookie store replaced")

    def close(self) -> None:
        """Release pooled connections."""
        self.http.close()

    def __enter__(self) -> "DeviceSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["DeviceSession", "create_device_http_session"]
