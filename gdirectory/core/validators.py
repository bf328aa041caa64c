"""Input validation helpers for directory user data."""
from __future__ import annotations
from typing import Any, Dict


def validate_email(email: str) -> str:
    """Validate email address.

    Args:
        email: Email address to validate

    Returns:
        Normalized email address

    Raises:
        ValueError: If email is invalid
    """
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValueError("Invalid email format")

    local, domain = email.rsplit("@", 1)
    if not local or not domain or "." not in domain:
        raise ValueError("Invalid email format")
    if len(email) > 254:
        raise ValueError("Email exceeds maximum length")
    if any(char.isspace() for char in email):
        raise ValueError("Invalid email format")

    return email


def validate_name(name: str, field: str) -> str:
    """Validate given/family name fields.

    Args:
        name: Name to validate
        field: Field name for error messages (e.g., "Given name")

    Returns:
        Trimmed name

    Raises:
        ValueError: If name is invalid
    """
    name = (name or "").strip()
    if not name:
        raise ValueError(f"{field} is required")
    # Directory API limit for givenName/familyName
    if len(name) > 60:
        raise ValueError(f"{field} exceeds maximum length")
    if any(char in name for char in "<>=\""):
        raise ValueError(f"{field} contains invalid characters")

    return name


def validate_password(password: str) -> str:
    """Check the password against the directory's length rules (8-100 characters)."""
    if not password or len(password) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(password) > 100:
        raise ValueError("Password must not exceed 100 characters")
    return password


def validate_user_payload(user: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a user resource before creation and return a normalized copy.

    Raises:
        ValueError: If a required field is missing or invalid
    """
    if not isinstance(user, dict):
        raise ValueError("User payload must be a mapping")

    name = user.get("name")
    if not isinstance(name, dict):
        raise ValueError("name.givenName and name.familyName are required")

    body = dict(user)
    body["primaryEmail"] = validate_email(user.get("primaryEmail", ""))
    body["name"] = {
        **name,
        "givenName": validate_name(name.get("givenName", ""), "Given name"),
        "familyName": validate_name(name.get("familyName", ""), "Family name"),
    }
    body["password"] = validate_password(user.get("password", ""))
    return body
