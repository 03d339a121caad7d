"""
Authentication module for the Experia Box V10 Exporter
======================================================

This module handles the token based login handshake and the logout call.

The device issues a numeric token per login attempt. The password is never
sent; instead the SHA-256 of the secret followed by the token is posted.

"""

import hashlib
import logging
import time
import xml.etree.ElementTree as ET

from experia_v10_exporter.client.http import DeviceSession
from experia_v10_exporter.exceptions import (
    ExperiaAuthenticationError,
    ExperiaError,
    ExperiaProtocolError,
)

logger = logging.getLogger("experia-v10-exporter")

LOGIN_PAGE_PATH = "/"
TOKEN_PATH = "/function_module/login_module/login_page/logintoken_lua.lua"
LOGIN_PATH = "/"
LOGOUT_PATH = "/"

# Present in the page served back when credentials are rejected.
LOGIN_FAILURE_MARKER = "loginWrapper"


def compute_credential_digest(secret: str, token: int) -> str:
    """
    Compute the login digest for a token.

    Args:
        secret: Static login secret
        token: Token issued by the device

    Returns:
        Lowercase hex SHA-256 of secret + decimal token
    """
    return hashlib.sha256(f"{secret}{token}".encode("utf-8")).hexdigest()


def parse_login_token(response_text: str) -> int:
    """
    Parse the token endpoint response.

    The body is an XML document whose root text is a single integer.

    Raises:
        ExperiaProtocolError: If the body is not XML or the token is not an integer
    """
    try:
        root = ET.fromstring(response_text)
    except ET.ParseError as e:
        raise ExperiaProtocolError(
            "Failed to parse login token response",
            details={"phase": "token", "parse_error": str(e), "response": response_text[:200]},
        ) from e

    token_text = (root.text or "").strip()
    try:
        return int(token_text)
    except ValueError as e:
        raise ExperiaProtocolError(
            "Login token is not an integer",
            details={"phase": "token", "token": token_text[:50]},
        ) from e


class LoginAuthenticator:
    """Handles the login handshake and logout for an Experia Box session."""

    def build_login_form(self, username: str, password_digest: str) -> dict[str, str]:
        """Build the login form with the computed digest."""
        return {
            "Username": username,
            "Password": password_digest,
            "action": "login",
        }

    def build_logout_form(self) -> dict[str, str]:
        """Build the logout form; the empty fields must be present."""
        return {
            "IF_LogOff": "1",
            "IF_LanguageSwitch": "",
            "IF_ModeSwitch": "",
        }

    def validate_login_response(self, response_text: str) -> bool:
        """
        Validate login response.

        Returns:
            False if the device served the login form again, True otherwise
        """
        return LOGIN_FAILURE_MARKER not in response_text

    def login(self, session: DeviceSession) -> None:
        """
        Log in to the device.

        Args:
            session: Session whose cookie store will hold the login state

        Raises:
            ExperiaTransportError: If any request fails
            ExperiaProtocolError: If the token cannot be parsed
            ExperiaAuthenticationError: If the device rejects the credentials
        """
        logger.info(f"🔐 Logging in to {session.host} as {session.username}...")
        start_time = time.time()

        # Establishes the server-side session cookies
        session.get(LOGIN_PAGE_PATH)

        token = parse_login_token(session.get(TOKEN_PATH))

        login_form = self.build_login_form(session.username, compute_credential_digest(session.password, token))
        response_text = session.post_form(LOGIN_PATH, login_form)

        if not self.validate_login_response(response_text):
            logger.error("Authentication rejected by device")
            raise ExperiaAuthenticationError(
                "Unable to login",
                details={"phase": "login", "host": session.host, "username": session.username},
            )

        logger.info(f"🎉 Authentication successful ({time.time() - start_time:.2f}s)")

    def logout(self, session: DeviceSession) -> None:
        """
        Log out of the device, best-effort.

        The cookie store is replaced whether or not the logout request
        succeeded. Failures are logged and never raised.
        """
        try:
            session.post_form(LOGOUT_PATH, self.build_logout_form())
            logger.debug("👋 Logged out")
        except ExperiaError as e:
            logger.debug(f"Logout failed, discarding session anyway: {e}")
        finally:
            session.reset_cookies()


__all__ = [
    "LOGIN_FAILURE_MARKER",
    "LoginAuthenticator",
    "TOKEN_PATH",
    "compute_credential_digest",
    "parse_login_token",
]
