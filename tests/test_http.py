"""Tests for the shared HTTP helpers with mocked httpx clients."""
import httpx
import pytest
from pydantic import BaseModel

from agent_usage_mcp.api.http import request_json, request_model
from agent_usage_mcp.errors import HttpError, UpstreamError


class Token(BaseModel):
    access_token: str


@pytest.mark.asyncio
async def test_request_model_validates_body(mock_http, fake_response):
    mock_http({"/token": fake_response(json_data={"access_token": "abc"})})

    token = await request_model("POST", "https://oauth.test/token", Token, timeout=5)

    assert token.access_token == "abc"


@pytest.mark.asyncio
async def test_request_model_non_200(mock_http, fake_response):
    mock_http({"/token": fake_response(status_code=401, text="unauthorized")})

    with pytest.raises(HttpError) as exc_info:
        await request_model("POST", "https://oauth.test/token", Token, timeout=5)

    assert exc_info.value.status == 401
    assert str(exc_info.value) == "HTTP 401: unauthorized"


@pytest.mark.asyncio
async def test_request_model_invalid_body(mock_http, fake_response):
    mock_http({"/token": fake_response(json_data={"token": "abc"})})

    with pytest.raises(UpstreamError, match="Invalid response"):
        await request_model("POST", "https://oauth.test/token", Token, timeout=5)


@pytest.mark.asyncio
async def test_request_model_non_json_body(mock_http, fake_response):
    mock_http({"/token": fake_response(text="<html>")})

    with pytest.raises(UpstreamError, match="Invalid response"):
        await request_model("POST", "https://oauth.test/token", Token, timeout=5)


@pytest.mark.asyncio
async def test_timeout_becomes_timed_out_error(mock_http):
    mock_http({"/slow": httpx.ReadTimeout("read timed out")})

    with pytest.raises(UpstreamError) as exc_info:
        await request_json("GET", "https://api.test/slow", operation="slow", timeout=5)

    assert str(exc_info.value) == "Request timed out"


@pytest.mark.asyncio
async def test_transport_error_becomes_upstream_error(mock_http):
    mock_http({"/down": httpx.ConnectError("connection refused")})

    with pytest.raises(UpstreamError, match="connection refused"):
        await request_json("GET", "https://api.test/down", operation="down", timeout=5)


@pytest.mark.asyncio
async def test_request_json_prefixes_operation_on_error(mock_http, fake_response):
    mock_http({"/models": fake_response(status_code=403, json_data={"error": "denied"})})

    with pytest.raises(HttpError) as exc_info:
        await request_json("POST", "https://api.test/models", operation="fetchAvailableModels", timeout=5)

    assert str(exc_info.value) == 'fetchAvailableModels HTTP 403: {"error": "denied"}'


@pytest.mark.asyncio
async def test_client_gets_configured_timeout(mock_http, fake_response):
    mock_http({"/ok": fake_response(json_data={})})

    await request_json("GET", "https://api.test/ok", operation="ok", timeout=7.5)

    httpx.AsyncClient.assert_called_once_with(timeout=7.5)
