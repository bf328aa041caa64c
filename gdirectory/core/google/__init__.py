"""Google Admin SDK Directory API client library.

This package provides a small, testable interface for checking whether an
email address belongs to a Workspace user or group, plus minimal user
management.

Architecture:
- auth.py: One-shot refresh token exchange (Authenticator)
- client.py: HTTP client with bearer authentication and envelope parsing
- users.py: User search, listing, get, create and update
- groups.py: Group existence checks
- aliases.py: Combined user-or-group resolution
- results.py: Found / NOT_FOUND lookup outcomes
- exceptions.py: Typed exceptions for error handling

Usage:
    from gdirectory.core.google import Authenticator, DirectoryClient

    auth = Authenticator(client_id, client_secret, refresh_token)
    client = DirectoryClient(auth)

    if client.is_email_a_user_or_group("alice@example.com"):
        ...

    user = client.users.get_user("alice@example.com")
"""
from .auth import (
    Authenticator,
    AccessToken,
    Credential,
    TOKEN_URL,
    REQUEST_TIMEOUT,
)
from .client import (
    DirectoryClient,
    API_BASE_URL,
    DEFAULT_CUSTOMER,
    is_error_envelope,
    error_from_envelope,
    raise_for_envelope,
)
from .exceptions import (
    DirectoryLookupError,
    AuthError,
    TransportError,
    DirectoryError,
)
from .results import Found, NotFound, NOT_FOUND, LookupResult
from .users import UserService, build_query
from .groups import GroupService
from .aliases import AliasService

__all__ = [
    # Auth
    "Authenticator",
    "AccessToken",
    "Credential",
    "TOKEN_URL",
    "REQUEST_TIMEOUT",

    # Client
    "DirectoryClient",
    "API_BASE_URL",
    "DEFAULT_CUSTOMER",
    "is_error_envelope",
    "error_from_envelope",
    "raise_for_envelope",

    # Exceptions
    "DirectoryLookupError",
    "AuthError",
    "TransportError",
    "DirectoryError",

    # Results
    "Found",
    "NotFound",
    "NOT_FOUND",
    "LookupResult",

    # Services
    "UserService",
    "GroupService",
    "AliasService",
    "build_query",
]
