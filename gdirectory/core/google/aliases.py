"""Email alias resolution across users and groups."""
from __future__ import annotations

from .client import DirectoryClient
from .groups import GroupService
from .users import UserService


class AliasService:
    """Resolve whether an email address is known to the directory."""

    def __init__(self, client: DirectoryClient):
        self.client = client
        self.users = UserService(client)
        self.groups = GroupService(client)

    def is_email_a_user_or_group(self, email: str, strict: bool = False) -> bool:
        """Return True when the address belongs to a user or is a group.

        The user check runs first; the group endpoint is only queried when
        no user matched.
        """
        if self.users.is_email_a_user(email):
            return True
        return self.groups.is_email_a_group(email, strict=strict)
