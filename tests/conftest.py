"""Shared pytest fixtures for all tests."""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from agent_usage_mcp.config import Settings


@pytest.fixture
def accounts_path(monkeypatch, tmp_path):
    """Point every Settings() at test credentials and a temp accounts file."""
    path = tmp_path / "antigravity-accounts.json"
    monkeypatch.setenv("OC_ZAI_API_KEY", "test-zai-key")
    monkeypatch.setenv("AG_CLIENT_SECRET", "test-client-secret")
    monkeypatch.setenv("AG_ACCOUNTS_FILE", str(path))
    monkeypatch.setenv("ZAI_BASE_URL", "https://zai.test")
    monkeypatch.setenv("AG_BASE_URL", "https://cloudcode.test")
    monkeypatch.setenv("AG_TOKEN_URL", "https://oauth.test/token")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")
    return path


@pytest.fixture
def settings(accounts_path):
    return Settings()


@pytest.fixture
def write_accounts(accounts_path):
    """Write an accounts file with the given account entries."""
    def _write(accounts):
        accounts_path.write_text(json.dumps({"version": 1, "accounts": accounts}))
        return accounts_path
    return _write


@pytest.fixture
def fake_response():
    """Build a stand-in for httpx.Response."""
    def _make(status_code=200, json_data=None, text=None):
        response = MagicMock()
        response.status_code = status_code
        if json_data is not None:
            response.json.return_value = json_data
            response.text = json.dumps(json_data)
        else:
            response.json.side_effect = ValueError("Expecting value")
            response.text = text or ""
        return response
    return _make


@pytest.fixture
def mock_http(monkeypatch):
    """Replace httpx.AsyncClient with a mock client.

    ``routes`` maps a URL substring to a response (or an exception to raise).
    Returns the mock client so tests can inspect ``client.request`` calls.
    """
    def _install(routes):
        def _route(method, url, **kwargs):
            for fragment, outcome in routes.items():
                if fragment in url:
                    if isinstance(outcome, Exception):
                        raise outcome
                    return outcome
            raise AssertionError(f"Unexpected request: {method} {url}")

        client = AsyncMock()
        client.__aenter__.return_value = client
        client.__aexit__.return_value = False
        client.request.side_effect = _route
        monkeypatch.setattr("httpx.AsyncClient", MagicMock(return_value=client))
        return client
    return _install
