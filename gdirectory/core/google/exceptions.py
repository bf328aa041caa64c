"""Directory-specific exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class DirectoryLookupError(Exception):
    """Base exception for all directory client operations."""
    pass


class AuthError(DirectoryLookupError):
    """Refresh token exchange was rejected by the token endpoint.

    Fatal: no DirectoryClient can be built from a failed exchange.

    Attributes:
        message: Server-provided description (error_description or error)
        error: OAuth2 error code (e.g., invalid_grant), when reported
    """

    def __init__(self, message: str, error: Optional[str] = None):
        self.message = message
        self.error = error
        if error and error != message:
            super().__init__(f"{error}: {message}")
        else:
            super().__init__(message)


class TransportError(DirectoryLookupError):
    """Network failure or a response body that is not valid JSON.

    Attributes:
        message: What went wrong
        url: Endpoint that failed (without query string)
    """

    def __init__(self, message: str, url: str = ""):
        self.message = message
        self.url = url
        super().__init__(f"{url}: {message}" if url else message)


class DirectoryError(DirectoryLookupError):
    """Application-level rejection carried in the API's error envelope.

    Attributes:
        code: HTTP-like status code from the envelope (0 when absent)
        message: Error message from the envelope
        reason: First machine-readable reason (e.g., notFound, forbidden)
        endpoint: API endpoint that failed
    """

    def __init__(self, code: int, message: str, reason: Optional[str] = None, endpoint: str = ""):
        self.code = code
        self.message = message
        self.reason = reason
        self.endpoint = endpoint
        super().__init__(f"[{code}] {endpoint}: {message}" if endpoint else f"[{code}] {message}")

    @property
    def is_not_found(self) -> bool:
        return self.code == 404 or self.reason == "notFound"
