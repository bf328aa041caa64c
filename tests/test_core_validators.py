import pytest

from gdirectory.core import validators


class TestValidateEmail:
    def test_returns_lowercased_email(self):
        assert validators.validate_email("  USER@Example.COM ") == "user@example.com"

    @pytest.mark.parametrize(
        "email",
        ["", "no-at-symbol", "user@", "@domain.com", "user@example", "a b@example.com", "a" * 255 + "@example.com"],
    )
    def test_invalid_email_formats(self, email):
        with pytest.raises(ValueError):
            validators.validate_email(email)


class TestValidateName:
    def test_valid_name_passes(self):
        assert validators.validate_name(" Alice ", "Given name") == "Alice"

    @pytest.mark.parametrize(
        "name, message",
        [
            ("", "Given name is required"),
            ("a" * 61, "Given name exceeds maximum length"),
            ("Alice<script>", "Given name contains invalid characters"),
        ],
    )
    def test_invalid_names(self, name, message):
        with pytest.raises(ValueError, match=message):
            validators.validate_name(name, "Given name")


class TestValidatePassword:
    def test_valid(self):
        assert validators.validate_password("correct horse") == "correct horse"

    @pytest.mark.parametrize("password", ["", "short", "x" * 101])
    def test_invalid(self, password):
        with pytest.raises(ValueError):
            validators.validate_password(password)


def test_validate_user_payload_keeps_extra_fields():
    body = validators.validate_user_payload({
        "primaryEmail": "Alice@Example.com",
        "name": {"givenName": " Alice ", "familyName": "Smith", "fullName": "Alice Smith"},
        "password": "Sup3rSecret!",
        "orgUnitPath": "/Staff",
    })
    assert body["primaryEmail"] == "alice@example.com"
    assert body["name"] == {"givenName": "Alice", "familyName": "Smith", "fullName": "Alice Smith"}
    assert body["orgUnitPath"] == "/Staff"
