"""Low-level HTTP client for the Google Admin SDK Directory API.

Handles bearer authentication, JSON serialization and error envelope parsing.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode, urlsplit

import requests

from .auth import AccessToken, Authenticator, REQUEST_TIMEOUT
from .exceptions import DirectoryError, TransportError
from .results import LookupResult

logger = logging.getLogger(__name__)

API_BASE_URL = "https://www.googleapis.com/admin/directory/v1"
DEFAULT_CUSTOMER = "my_customer"
BODY_METHODS = ("POST", "PUT", "PATCH")


class DirectoryClient:
    """HTTP client for the Directory API holding a fixed access token.

    Features:
    - Bearer header on every call once a token is present
    - JSON bodies for POST/PUT/PATCH, bare GET otherwise
    - Result-based contract: error envelopes are returned, never raised

    The access token is copied from the authenticator once and cannot be
    reassigned afterwards. Renewal means building a new client.

    Usage:
        client = DirectoryClient(Authenticator(client_id, secret, refresh_token))
        payload = client.request("users?customer=my_customer")
        client.is_email_a_user_or_group("someone@example.com")
    """

    def __init__(
        self,
        auth: Union[Authenticator, AccessToken, None],
        *,
        base_url: str = API_BASE_URL,
        customer: str = DEFAULT_CUSTOMER,
        timeout: float = REQUEST_TIMEOUT,
    ):
        """Initialize directory client.

        Args:
            auth: Authenticator that completed its exchange, or a pre-obtained AccessToken
            base_url: Directory API root
            customer: Customer scope for user searches
            timeout: Per-request timeout in seconds
        """
        if isinstance(auth, Authenticator):
            token = auth.access_token
        else:
            token = auth
        self._access_token: Optional[AccessToken] = token
        self.base_url = base_url.rstrip("/")
        self.customer = customer
        self.timeout = timeout

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "_access_token" and "_access_token" in self.__dict__:
            raise AttributeError("Access token cannot be reassigned; build a new DirectoryClient")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if name == "_access_token":
            raise AttributeError("Access token cannot be removed")
        super().__delattr__(name)

    @classmethod
    def from_settings(cls, settings) -> "DirectoryClient":
        """Run the token exchange and build a client from a DirectoryConfig."""
        return cls(
            Authenticator.from_settings(settings),
            base_url=settings.api_base_url,
            customer=settings.customer,
            timeout=settings.request_timeout,
        )

    @property
    def access_token(self) -> Optional[AccessToken]:
        return self._access_token

    def url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Build an absolute URL from an API path and optional query parameters.

        Args:
            path: Relative path (e.g., "users") or an absolute URL
            params: Query parameters, encoded in insertion order

        Returns:
            Absolute URL with encoded query string
        """
        if urlsplit(path).scheme:
            full = path
        else:
            full = f"{self.base_url}/{path.lstrip('/')}"
        query = urlencode({k: v for k, v in (params or {}).items() if v is not None})
        if query:
            full = f"{full}{'&' if '?' in full else '?'}{query}"
        return full

    def request(self, url: str, method: Optional[str] = None, body: Optional[Any] = None) -> Dict[str, Any]:
        """Issue one authenticated call and return the parsed JSON body.

        Args:
            url: API path or absolute URL, query parameters already encoded
            method: HTTP method; defaults to GET without a body, POST with one
            body: JSON-serializable payload for body-bearing calls

        Returns:
            Parsed JSON object, which may be an error envelope (see is_error_envelope)

        Raises:
            TransportError: Connection failure, timeout, non-JSON body or a JSON
                document that is not an object
            ValueError: A body was given with a method that cannot carry one
        """
        method = (method or ("GET" if body is None else "POST")).upper()
        if body is not None and method not in BODY_METHODS:
            raise ValueError(f"{method} requests cannot carry a JSON body")

        full_url = self.url(url)
        endpoint = full_url.split("?", 1)[0]
        headers: Dict[str, str] = {"Accept": "application/json"}
        if self._access_token is not None:
            headers["Authorization"] = self._access_token.authorization_header
        else:
            logger.warning("Directory request to %s issued without an access token", endpoint)

        kwargs: Dict[str, Any] = {"headers": headers, "timeout": self.timeout}
        if body is not None:
            kwargs["json"] = body

        logger.debug("%s %s", method, endpoint)
        try:
            resp = requests.request(method, full_url, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"{method} request failed: {exc}", endpoint) from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            raise TransportError(
                f"Response is not valid JSON (HTTP {resp.status_code})", endpoint
            ) from exc

        # Every Directory API resource and error envelope is a JSON object
        if not isinstance(payload, dict):
            raise TransportError(
                f"Response is not a JSON object (HTTP {resp.status_code})", endpoint
            )
        return payload

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """GET a resource; query parameters are encoded into the URL."""
        return self.request(self.url(path, params))

    # ─────────────────────────────────────────────────────────────────────
    # Lookup operations (delegated to per-resource services)
    # ─────────────────────────────────────────────────────────────────────
    @property
    def users(self):
        from .users import UserService
        return UserService(self)

    @property
    def groups(self):
        from .groups import GroupService
        return GroupService(self)

    @property
    def aliases(self):
        from .aliases import AliasService
        return AliasService(self)

    def find_user(self, search_fields: Mapping[str, str]) -> LookupResult:
        return self.users.find_user(search_fields)

    def is_email_a_user(self, email: str) -> bool:
        return self.users.is_email_a_user(email)

    def is_email_a_group(self, email: str, strict: bool = False) -> bool:
        return self.groups.is_email_a_group(email, strict=strict)

    def is_email_a_user_or_group(self, email: str, strict: bool = False) -> bool:
        return self.aliases.is_email_a_user_or_group(email, strict=strict)


# ─────────────────────────────────────────────────────────────────────────────
# Error envelope helpers
# ─────────────────────────────────────────────────────────────────────────────
def is_error_envelope(payload: Any) -> bool:
    """Return True when a parsed response carries an API error envelope."""
    return isinstance(payload, dict) and "error" in payload


def error_from_envelope(payload: Dict[str, Any], endpoint: str = "") -> DirectoryError:
    """Convert an error envelope into a DirectoryError.

    Handles both the Directory API shape
    {"error": {"code": 404, "message": "...", "errors": [{"reason": "notFound"}]}}
    and the OAuth shape {"error": "invalid_grant", "error_description": "..."}.
    """
    error = payload.get("error")
    if isinstance(error, dict):
        try:
            code = int(error.get("code") or 0)
        except (TypeError, ValueError):
            code = 0
        message = error.get("message") or "Unknown directory error"
        details = error.get("errors") or []
        reason = None
        if details and isinstance(details[0], dict):
            reason = details[0].get("reason")
        if reason is None:
            reason = error.get("status")
        return DirectoryError(code, message, reason=reason, endpoint=endpoint)

    message = payload.get("error_description") or str(error)
    code = 401 if error in ("invalid_token", "invalid_grant", "unauthorized_client") else 0
    return DirectoryError(code, message, reason=str(error), endpoint=endpoint)


def raise_for_envelope(payload: Any, endpoint: str = "") -> None:
    """Centralized error handling for parsed responses.

    Raises:
        DirectoryError: If the payload is an error envelope
    """
    if is_error_envelope(payload):
        raise error_from_envelope(payload, endpoint)
