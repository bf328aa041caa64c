"""Directory user lookup and management operations."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from .client import DirectoryClient, error_from_envelope, is_error_envelope, raise_for_envelope
from .results import Found, LookupResult, NOT_FOUND
from ..validators import validate_user_payload

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500


def build_query(search_fields: Optional[Mapping[str, str]]) -> str:
    """Join search fields into the comma-separated "key=value" query expression."""
    if not search_fields:
        return ""
    return ",".join(f"{key}={value}" for key, value in search_fields.items())


class UserService:
    """Service for looking up and managing directory users."""

    def __init__(self, client: DirectoryClient):
        """Initialize user service.

        Args:
            client: Authenticated directory client
        """
        self.client = client

    def _user_path(self, user_key: str) -> str:
        return f"users/{quote(user_key, safe='')}"

    def find_user(self, search_fields: Mapping[str, str]) -> LookupResult:
        """Return the first user matching the search fields.

        Only the first match is returned even when several users match.

        Args:
            search_fields: Field/value pairs, e.g. {"email": "alice@example.com"}

        Returns:
            Found(user) or NOT_FOUND when the user list is empty

        Raises:
            DirectoryError: The search was rejected by the API
        """
        payload = self.client.get("users", {"customer": self.client.customer, "query": build_query(search_fields)})
        raise_for_envelope(payload, self.client.url("users"))

        users = payload.get("users") or []
        if not users:
            return NOT_FOUND
        if len(users) > 1:
            logger.warning("User search matched %d users; returning the first", len(users))
        return Found(users[0])

    def is_email_a_user(self, email: str) -> bool:
        """Return True when the email address belongs to a user account."""
        return self.find_user({"email": email}) is not NOT_FOUND

    def find_users(self, search_fields: Optional[Mapping[str, str]] = None, max_results: int = MAX_PAGE_SIZE) -> List[Dict[str, Any]]:
        """List all users matching the search fields, following pagination.

        Pages are requested one at a time until no nextPageToken is returned.

        Args:
            search_fields: Optional field/value pairs; all users when omitted
            max_results: Page size (1-500)

        Returns:
            Users from every page, in page order

        Raises:
            ValueError: If max_results is out of range
            DirectoryError: Any page was rejected by the API
        """
        if not 1 <= max_results <= MAX_PAGE_SIZE:
            raise ValueError(f"max_results must be between 1 and {MAX_PAGE_SIZE}")

        query = build_query(search_fields)
        users: List[Dict[str, Any]] = []
        page_token: Optional[str] = None
        pages = 0
        while True:
            params: Dict[str, Any] = {"customer": self.client.customer, "maxResults": max_results}
            if page_token:
                params["pageToken"] = page_token
            if query:
                params["query"] = query
            payload = self.client.get("users", params)
            raise_for_envelope(payload, self.client.url("users"))

            pages += 1
            users.extend(payload.get("users") or [])
            page_token = payload.get("nextPageToken")
            if not page_token:
                break

        logger.debug("Listed %d users across %d page(s)", len(users), pages)
        return users

    def get_user(self, user_key: str) -> LookupResult:
        """Retrieve a user by primary email, alias or unique ID.

        Returns:
            Found(user) or NOT_FOUND when the API reports the user as absent

        Raises:
            DirectoryError: Any error other than not-found
        """
        path = self._user_path(user_key)
        payload = self.client.request(path)
        if is_error_envelope(payload):
            error = error_from_envelope(payload, self.client.url(path))
            if error.is_not_found:
                return NOT_FOUND
            raise error
        return Found(payload)

    def create_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        """Create a user account.

        Args:
            user: User resource with at least primaryEmail, name.givenName,
                name.familyName and password

        Returns:
            The created user resource

        Raises:
            ValueError: If the payload fails local validation
            DirectoryError: The API rejected the user
        """
        body = validate_user_payload(user)
        payload = self.client.request("users", "POST", body)
        raise_for_envelope(payload, self.client.url("users"))
        logger.info("Created user %s (id=%s)", payload.get("primaryEmail"), payload.get("id"))
        return payload

    def update_user(self, user_key: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Update a user; only the supplied fields are changed.

        Raises:
            ValueError: If no fields are supplied
            DirectoryError: The API rejected the update (including not-found)
        """
        if not fields:
            raise ValueError("No fields to update")
        path = self._user_path(user_key)
        payload = self.client.request(path, "PUT", fields)
        raise_for_envelope(payload, self.client.url(path))
        logger.info("Updated user %s (fields=%s)", user_key, sorted(fields))
        return payload
