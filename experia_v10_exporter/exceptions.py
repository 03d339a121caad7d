"""
Custom exceptions for the Experia Box V10 exporter.

All exceptions inherit from ExperiaError so a poll can catch every
library-specific failure in one place without hiding programming errors.

Example usage:
    try:
        client.login()
    except ExperiaAuthenticationError as e:
        print(f"Authentication failed: {e}")
    except ExperiaError as e:
        print(f"Experia error: {e}")

License: MIT
"""

from typing import Any, Optional

import requests


class ExperiaError(Exception):
    """
    Base exception for all Experia Box V10 exporter errors.

    Attributes:
        message: Human-readable error message
        details: Optional dictionary with additional error context
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ExperiaTransportError(ExperiaError):
    """
    Raised when the device cannot be reached.

    This covers DNS failures, refused connections and dropped sockets.
    It is never the device's fault.

    Attributes:
        details: May include 'url', 'error_type', 'original_error'
    """


class ExperiaTimeoutError(ExperiaTransportError):
    """
    Raised when a request exceeds the configured timeout.

    Attributes:
        details: May include 'url', 'timeout'
    """


class ExperiaProtocolError(ExperiaError):
    """
    Raised when the device returns something that cannot be interpreted.

    This exception is raised when:
    - An XML body is not well-formed
    - The login token is not an integer

    Attributes:
        details: May include 'phase', 'parse_error', 'response'
    """


class ExperiaAuthenticationError(ExperiaError):
    """
    Raised when the device rejects the credentials.

    The device re-renders its login form on bad credentials, so this is
    detected from the response content rather than the status code.
    """


class ExperiaConfigurationError(ExperiaError):
    """
    Raised when exporter configuration is invalid.

    Attributes:
        details: May include 'parameter', 'value'
    """


def wrap_transport_error(original_error: requests.exceptions.RequestException, url: str, timeout: float) -> ExperiaTransportError:
    """
    Wrap a requests exception in ExperiaTransportError.

    Args:
        original_error: The original exception
        url: URL that was being requested
        timeout: Timeout that was in effect

    Returns:
        ExperiaTimeoutError for timeouts, ExperiaTransportError otherwise
    """
    if isinstance(original_error, requests.exceptions.Timeout):
        return ExperiaTimeoutError(
            f"Request to {url} timed out after {timeout}s",
            details={"url": url, "timeout": timeout, "original_error": str(original_error)},
        )

    message = f"Failed to reach {url}"
    if isinstance(original_error, requests.exceptions.ConnectionError):
        message = f"Connection to {url} failed - device may be offline or unreachable"

    return ExperiaTransportError(
        message,
        details={
            "url": url,
            "error_type": type(original_error).__name__,
            "original_error": str(original_error),
        },
    )


__all__ = [
    "ExperiaAuthenticationError",
    "ExperiaConfigurationError",
    "ExperiaError",
    "ExperiaProtocolError",
    "ExperiaTimeoutError",
    "ExperiaTransportError",
    "wrap_transport_error",
]
