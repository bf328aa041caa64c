"""Directory group lookup operations."""
from __future__ import annotations
import logging
from urllib.parse import quote

from .client import DirectoryClient, error_from_envelope, is_error_envelope
from .exceptions import DirectoryError
from .results import Found, LookupResult, NOT_FOUND

logger = logging.getLogger(__name__)


class GroupService:
    """Service for looking up directory groups."""

    def __init__(self, client: DirectoryClient):
        """Initialize group service.

        Args:
            client: Authenticated directory client
        """
        self.client = client

    def find_group(self, group_key: str) -> LookupResult:
        """Retrieve a group by email address, alias or unique ID.

        Args:
            group_key: Group identifier (URL-escaped before use)

        Returns:
            Found(group) or NOT_FOUND when the API reports the group as absent

        Raises:
            DirectoryError: Any error other than not-found (e.g., forbidden)
        """
        path = f"groups/{quote(group_key, safe='')}"
        payload = self.client.request(path)
        if is_error_envelope(payload):
            error = error_from_envelope(payload, self.client.url(path))
            if error.is_not_found:
                return NOT_FOUND
            raise error
        return Found(payload)

    def is_email_a_group(self, email: str, strict: bool = False) -> bool:
        """Return True when the email address is a group.

        Without strict, every error envelope counts as "not a group", which
        also hides failures such as permission errors. Those are logged. With
        strict, only a not-found envelope yields False and other errors raise.

        Raises:
            DirectoryError: Non-not-found error while strict is set
        """
        try:
            return self.find_group(email) is not NOT_FOUND
        except DirectoryError as exc:
            if strict:
                raise
            logger.warning("Group lookup for %s failed, treating as not a group: %s", email, exc)
            return False
