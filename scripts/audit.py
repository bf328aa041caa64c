"""Audit trail for directory user mutations (create/update)."""

from __future__ import annotations
import datetime
import hashlib
import hmac
import json
import os
import sys
from pathlib import Path
from typing import Any, Literal

AUDIT_LOG_DIR = Path(os.environ.get("AUDIT_LOG_DIR", ".runtime/audit"))
AUDIT_LOG_FILE = AUDIT_LOG_DIR / "directory-events.jsonl"
_SIGNING_KEY_FILE = os.environ.get("AUDIT_LOG_SIGNING_KEY_FILE")

EventType = Literal["user_create", "user_update"]


def _get_signing_key() -> bytes:
    """Return the HMAC key: key file first, then AUDIT_LOG_SIGNING_KEY. Empty disables signing."""
    if _SIGNING_KEY_FILE:
        path = Path(_SIGNING_KEY_FILE)
        if path.exists():
            try:
                return path.read_text(encoding="utf-8").strip().encode("utf-8")
            except OSError:
                pass
    return os.environ.get("AUDIT_LOG_SIGNING_KEY", "").strip().encode("utf-8")


def _ensure_audit_dir() -> None:
    """Create audit directory with restricted permissions."""
    AUDIT_LOG_DIR.mkdir(parents=True, exist_ok=True)
    AUDIT_LOG_DIR.chmod(0o700)


def _sign_event(event: dict[str, Any]) -> str:
    """Generate HMAC-SHA256 signature for audit event."""
    signing_key = _get_signing_key()
    if not signing_key:
        return ""
    canonical = json.dumps(event, sort_keys=True, separators=(",", ":"))
    return hmac.new(signing_key, canonical.encode("utf-8"), hashlib.sha256).hexdigest()


def log_directory_event(
    event_type: EventType,
    user_key: str,
    *,
    operator: str = "cli",
    customer: str = "my_customer",
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    """Append a signed event to the audit trail.

    Args:
        event_type: user_create or user_update
        user_key: Primary email or ID of the affected user
        operator: Who performed the operation
        customer: Directory customer scope
        details: Additional context (changed field names, error message).
            Never pass passwords here.
        success: Whether the operation succeeded
    """
    _ensure_audit_dir()

    event = {
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "event_type": event_type,
        "customer": customer,
        "user": user_key,
        "operator": operator,
        "success": success,
        "details": details or {},
    }

    signature = _sign_event(event)
    if signature:
        event["signature"] = signature

    with AUDIT_LOG_FILE.open("a", encoding="utf-8") as f:
        f.write(json.dumps(event, ensure_ascii=False) + "\n")

    AUDIT_LOG_FILE.chmod(0o600)


def safe_log_directory_event(event_type: EventType, user_key: str, **kwargs: Any) -> bool:
    """Log an event, reporting failures on stderr instead of raising.

    Returns:
        True if the event was written, False otherwise
    """
    try:
        log_directory_event(event_type, user_key, **kwargs)
        return True
    except OSError as e:
        print(f"[audit] Warning: Failed to log {event_type} event for {user_key}: {e}", file=sys.stderr)
        return False


def verify_audit_log() -> tuple[int, int]:
    """Verify all signatures in the audit log.

    Returns:
        Tuple of (total_events, valid_signatures)
    """
    if not AUDIT_LOG_FILE.exists():
        return 0, 0

    total = 0
    valid = 0

    with AUDIT_LOG_FILE.open("r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            total += 1
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            stored_sig = event.pop("signature", "")
            if stored_sig and hmac.compare_digest(stored_sig, _sign_event(event)):
                valid += 1

    return total, valid


if __name__ == "__main__":
    total, valid = verify_audit_log()
    print(f"Audit log: {valid}/{total} events with valid signatures")
    sys.exit(0 if total == valid else 1)
