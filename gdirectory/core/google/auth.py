"""OAuth2 refresh token exchange for the Google Admin SDK.

The access token is fetched exactly once, when the Authenticator is built.
There is no renewal: once the token expires upstream, every directory call
fails with an authentication envelope and the caller must build a new
Authenticator.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from .exceptions import AuthError, TransportError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.google.com/o/oauth2/token"
REQUEST_TIMEOUT = 15


@dataclass(frozen=True)
class Credential:
    """Long-lived refresh credential supplied by the caller."""
    client_id: str
    client_secret: str = field(repr=False)
    refresh_token: str = field(repr=False)

    def as_form(self) -> Dict[str, str]:
        """Return the refresh grant parameters (form-encoded, never JSON)."""
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": self.refresh_token,
            "grant_type": "refresh_token",
        }


@dataclass(frozen=True)
class AccessToken:
    """Bearer token obtained from the refresh grant."""
    value: str = field(repr=False)
    obtained_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.value:
            raise ValueError("Access token must not be empty")

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.value}"


class Authenticator:
    """Exchanges a refresh token for an access token at construction time.

    Usage:
        auth = Authenticator(client_id, client_secret, refresh_token)
        client = DirectoryClient(auth)

    Raises on construction:
        AuthError: The token endpoint answered with an error envelope
        TransportError: Network failure or non-JSON response
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        *,
        token_url: str = TOKEN_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self._credential = Credential(client_id, client_secret, refresh_token)
        self.token_url = token_url
        self.timeout = timeout
        self.token_type: Optional[str] = None
        self.expires_in: Optional[int] = None
        self._access_token = self._exchange()

    @classmethod
    def from_settings(cls, settings) -> "Authenticator":
        """Build an authenticator from a DirectoryConfig."""
        return cls(
            settings.client_id,
            settings.client_secret,
            settings.refresh_token,
            token_url=settings.token_url,
            timeout=settings.request_timeout,
        )

    @property
    def client_id(self) -> str:
        return self._credential.client_id

    @property
    def access_token(self) -> AccessToken:
        """Token obtained at construction (read-only)."""
        return self._access_token

    def _exchange(self) -> AccessToken:
        """POST the refresh grant and parse the token response."""
        try:
            resp = requests.post(self.token_url, data=self._credential.as_form(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"Token exchange failed: {exc}", self.token_url) from exc

        try:
            payload: Dict[str, Any] = resp.json()
        except ValueError as exc:
            raise TransportError(
                f"Token endpoint returned a non-JSON body (HTTP {resp.status_code})", self.token_url
            ) from exc

        if not isinstance(payload, dict):
            raise TransportError("Token endpoint returned an unexpected JSON document", self.token_url)

        if "error" in payload:
            error = payload.get("error")
            if isinstance(error, dict):
                # Some Google endpoints wrap OAuth errors in the API envelope
                message = error.get("message") or str(error.get("status", "unknown error"))
                code = error.get("status")
            else:
                code = str(error)
                message = payload.get("error_description") or code
            logger.error("Refresh token exchange rejected for client %s: %s", self.client_id, code)
            raise AuthError(message, error=code)

        token = payload.get("access_token")
        if not token:
            raise AuthError("Token endpoint response did not include an access_token")

        self.token_type = payload.get("token_type")
        self.expires_in = payload.get("expires_in")
        logger.info("Obtained access token for client %s (expires_in=%s)", self.client_id, self.expires_in)
        return AccessToken(str(token))
