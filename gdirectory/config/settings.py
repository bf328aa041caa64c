"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..core.google.auth import REQUEST_TIMEOUT, TOKEN_URL
from ..core.google.client import API_BASE_URL, DEFAULT_CUSTOMER

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.debug("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment", env_var)
            return secret_value

    return None


@dataclass
class DirectoryConfig:
    """Directory client configuration container."""
    # OAuth2 credential (secrets are hidden from repr)
    client_id: str
    client_secret: str = field(default="", repr=False)
    refresh_token: str = field(default="", repr=False)

    # Endpoints
    token_url: str = TOKEN_URL
    api_base_url: str = API_BASE_URL
    customer: str = DEFAULT_CUSTOMER

    # Per-request timeout in seconds
    request_timeout: float = REQUEST_TIMEOUT


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return float(REQUEST_TIMEOUT)
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"GOOGLE_REQUEST_TIMEOUT must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError("GOOGLE_REQUEST_TIMEOUT must be positive")
    return value


def _require(value: str | None, var_name: str) -> str:
    if not value:
        raise RuntimeError(
            f"{var_name} is required. "
            f"Provide it via /run/secrets or the {var_name} environment variable."
        )
    return value


def load_settings() -> DirectoryConfig:
    """Load directory settings from environment and /run/secrets.

    Raises:
        RuntimeError: If a required credential is missing
        ValueError: If GOOGLE_REQUEST_TIMEOUT is invalid
    """
    client_id = _require(os.environ.get("GOOGLE_CLIENT_ID"), "GOOGLE_CLIENT_ID")
    client_secret = _require(
        _load_secret_from_file("google_client_secret", "GOOGLE_CLIENT_SECRET"), "GOOGLE_CLIENT_SECRET"
    )
    refresh_token = _require(
        _load_secret_from_file("google_refresh_token", "GOOGLE_REFRESH_TOKEN"), "GOOGLE_REFRESH_TOKEN"
    )

    return DirectoryConfig(
        client_id=client_id,
        client_secret=client_secret,
        refresh_token=refresh_token,
        token_url=os.environ.get("GOOGLE_TOKEN_URL") or TOKEN_URL,
        api_base_url=(os.environ.get("GOOGLE_DIRECTORY_URL") or API_BASE_URL).rstrip("/"),
        customer=os.environ.get("GOOGLE_CUSTOMER") or DEFAULT_CUSTOMER,
        request_timeout=_parse_timeout(os.environ.get("GOOGLE_REQUEST_TIMEOUT")),
    )
