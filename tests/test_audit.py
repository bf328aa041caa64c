"""Unit tests for the directory audit trail."""

import json

import pytest

from scripts import audit


@pytest.fixture
def temp_audit_dir(monkeypatch, tmp_path):
    """Provide isolated audit directory for each test."""
    audit_dir = tmp_path / "audit"
    audit_file = audit_dir / "directory-events.jsonl"

    monkeypatch.setattr(audit, "AUDIT_LOG_DIR", audit_dir)
    monkeypatch.setattr(audit, "AUDIT_LOG_FILE", audit_file)
    monkeypatch.setattr(audit, "_SIGNING_KEY_FILE", None)
    monkeypatch.setenv("AUDIT_LOG_SIGNING_KEY", "test-signing-key-for-audit-trail")

    return audit_dir, audit_file


def test_log_creates_file_with_restricted_permissions(temp_audit_dir):
    _, audit_file = temp_audit_dir

    assert not audit_file.exists()
    audit.log_directory_event("user_create", "alice@example.com", operator="helpdesk")

    assert audit_file.exists()
    assert audit_file.stat().st_mode & 0o777 == 0o600


def test_logged_event_fields(temp_audit_dir):
    _, audit_file = temp_audit_dir

    audit.log_directory_event(
        "user_update",
        "alice@example.com",
        operator="cli",
        customer="C01abc",
        details={"fields": ["suspended"]},
        success=True,
    )

    event = json.loads(audit_file.read_text().strip())
    assert event["event_type"] == "user_update"
    assert event["user"] == "alice@example.com"
    assert event["customer"] == "C01abc"
    assert event["details"] == {"fields": ["suspended"]}
    assert event["success"] is True
    assert len(event["signature"]) == 64


def test_events_are_appended(temp_audit_dir):
    _, audit_file = temp_audit_dir

    audit.log_directory_event("user_create", "a@example.com")
    audit.log_directory_event("user_create", "b@example.com")

    lines = [line for line in audit_file.read_text().splitlines() if line]
    assert [json.loads(line)["user"] for line in lines] == ["a@example.com", "b@example.com"]


def test_verify_detects_tampering(temp_audit_dir):
    _, audit_file = temp_audit_dir

    audit.log_directory_event("user_create", "a@example.com")
    audit.log_directory_event("user_create", "b@example.com")
    assert audit.verify_audit_log() == (2, 2)

    lines = audit_file.read_text().splitlines()
    tampered = json.loads(lines[1])
    tampered["user"] = "mallory@example.com"
    lines[1] = json.dumps(tampered)
    audit_file.write_text("\n".join(lines) + "\n")

    assert audit.verify_audit_log() == (2, 1)


def test_unsigned_when_no_key(temp_audit_dir, monkeypatch):
    _, audit_file = temp_audit_dir
    monkeypatch.delenv("AUDIT_LOG_SIGNING_KEY")

    audit.log_directory_event("user_create", "a@example.com")

    assert "signature" not in json.loads(audit_file.read_text())
    assert audit.verify_audit_log() == (1, 0)


def test_signing_key_file_takes_precedence(temp_audit_dir, monkeypatch, tmp_path):
    key_file = tmp_path / "key"
    key_file.write_text("file-key\n")
    monkeypatch.setattr(audit, "_SIGNING_KEY_FILE", str(key_file))

    assert audit._get_signing_key() == b"file-key"


def test_verify_without_log(temp_audit_dir):
    assert audit.verify_audit_log() == (0, 0)


def test_safe_log_reports_failure(monkeypatch, capsys):
    def broken(*args, **kwargs):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(audit, "log_directory_event", broken)

    assert audit.safe_log_directory_event("user_create", "a@example.com") is False
    assert "Failed to log user_create" in capsys.readouterr().err
