"""Pytest shared fixtures for directory client tests."""
import json
import pathlib
import sys
from types import SimpleNamespace
from urllib.parse import parse_qs, urlsplit

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from gdirectory.core.google import Authenticator, DirectoryClient, API_BASE_URL, TOKEN_URL


class _StubResponse:
    def __init__(self, payload, status_code: int = 200):
        self.status_code = status_code
        self.text = payload if isinstance(payload, str) else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


def not_found_envelope(message: str = "Resource Not Found") -> dict:
    return {"error": {"code": 404, "message": message, "errors": [{"reason": "notFound", "message": message}]}}


def forbidden_envelope(message: str = "Not Authorized to access this resource/api") -> dict:
    return {"error": {"code": 403, "message": message, "errors": [{"reason": "forbidden", "message": message}]}}


class FakeGoogle:
    """In-memory token endpoint and Directory API.

    Routes are keyed on (method, path relative to the API root). Each route
    holds a queue of (payload, status) answers; the last answer repeats.
    Every call is recorded in ``calls`` / ``token_calls``.
    """

    def __init__(self):
        self.token_payload = {"access_token": "tok123", "expires_in": 3599, "token_type": "Bearer"}
        self.token_status = 200
        self.token_calls = []
        self.routes = {}
        self.calls = []

    def add(self, method: str, path: str, *payloads, status: int = 200):
        self.routes[(method.upper(), path)] = [(payload, status) for payload in payloads]

    def calls_to(self, path: str, method: str = "GET"):
        return [call for call in self.calls if call.path == path and call.method == method]

    def post(self, url, data=None, json=None, timeout=None, **kwargs):
        self.token_calls.append(SimpleNamespace(url=url, data=data, json=json, timeout=timeout, kwargs=kwargs))
        return _StubResponse(self.token_payload, self.token_status)

    def request(self, method, url, headers=None, json=None, timeout=None, **kwargs):
        parts = urlsplit(url)
        base_path = urlsplit(API_BASE_URL).path.rstrip("/") + "/"
        path = parts.path[len(base_path):] if parts.path.startswith(base_path) else parts.path
        params = {key: values[0] for key, values in parse_qs(parts.query, keep_blank_values=True).items()}
        self.calls.append(SimpleNamespace(
            method=method, url=url, path=path, params=params,
            headers=dict(headers or {}), json=json, timeout=timeout,
        ))
        answers = self.routes.get((method, path))
        if not answers:
            raise RuntimeError(f"Unexpected {method} in unit test: {url}")
        payload, status = answers.pop(0) if len(answers) > 1 else answers[0]
        return _StubResponse(payload, status)


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    """Prevent unit tests from hitting Google."""

    def _blocked(*args, **kwargs):
        raise RuntimeError(f"Unexpected network access in unit test: {args}")

    monkeypatch.setattr(requests, "post", _blocked)
    monkeypatch.setattr(requests, "request", _blocked)


@pytest.fixture()
def google_api(monkeypatch):
    """Fake token endpoint and Directory API wired into requests."""
    fake = FakeGoogle()
    monkeypatch.setattr(requests, "post", fake.post)
    monkeypatch.setattr(requests, "request", fake.request)
    return fake


@pytest.fixture()
def client(google_api):
    """DirectoryClient built through a successful token exchange."""
    auth = Authenticator("client-id", "client-secret", "refresh-token", token_url=TOKEN_URL)
    return DirectoryClient(auth)
