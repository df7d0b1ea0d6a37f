"""Antigravity (Google Cloud Code) client.

Loads the locally stored accounts, exchanges refresh tokens for access
tokens, and fetches the two raw quota payloads. Payload parsing lives in
``aggregators.quota`` so it can be tested against literal fixtures.
"""
from __future__ import annotations
import json
import logging
import platform
from typing import Any

from pydantic import ValidationError

from agent_usage_mcp.api.http import request_json, request_model
from agent_usage_mcp.config import Settings
from agent_usage_mcp.errors import AccountStoreError, ConfigError, NoAccountsConfiguredError
from agent_usage_mcp.models.antigravity import (
    AntigravityAccount,
    AntigravityAccountsFile,
    OAuthTokenResponse,
)

logger = logging.getLogger(__name__)

FETCH_MODELS_PATH = "/v1internal:fetchAvailableModels"
RETRIEVE_QUOTA_PATH = "/v1internal:retrieveUserQuota"

ANTIGRAVITY_HEADERS = {
    "User-Agent": "Mozilla/5.0 Antigravity/1.15.8 Chrome/138.0.7204.235 Electron/37.3.1",
    "X-Goog-Api-Client": "google-cloud-sdk vscode_cloudshelleditor/0.1",
    "Client-Metadata": json.dumps(
        {
            "ideType": "IDE_UNSPECIFIED",
            "platform": "PLATFORM_UNSPECIFIED",
            "pluginType": "GEMINI",
        },
        separators=(",", ":"),
    ),
}


def load_accounts(settings: Settings | None = None) -> list[AntigravityAccount]:
    """Load the account list from the accounts file.

    Raises:
        NoAccountsConfiguredError: If the file is missing or lists no accounts
        AccountStoreError: If the file is not valid JSON or has the wrong shape
    """
    settings = settings or Settings()
    path = settings.ag_accounts_file

    if not path.exists():
        raise NoAccountsConfiguredError(
            f"Antigravity accounts file not found at {path}. Run 'opencode auth login' first."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        parsed = AntigravityAccountsFile.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        raise AccountStoreError(f"Invalid Antigravity accounts file {path}: {e}") from e

    if not parsed.accounts:
        raise NoAccountsConfiguredError("No Antigravity accounts configured")

    logger.debug(f"Loaded {len(parsed.accounts)} Antigravity accounts from {path}")
    return parsed.accounts


async def refresh_access_token(refresh_token: str, settings: Settings | None = None) -> str:
    """Exchange a refresh token for a short-lived access token.

    Raises:
        ConfigError: If AG_CLIENT_SECRET is not set
        UpstreamError: If the token endpoint fails
    """
    settings = settings or Settings()
    if not settings.ag_client_secret:
        raise ConfigError("AG_CLIENT_SECRET environment variable is not set")

    response = await request_model(
        "POST",
        settings.ag_token_url,
        OAuthTokenResponse,
        timeout=settings.request_timeout,
        form={
            "client_id": settings.ag_client_id,
            "client_secret": settings.ag_client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        },
    )
    return response.access_token


def _project_body(project_id: str | None) -> dict[str, str]:
    return {"project": project_id} if project_id else {}


async def fetch_antigravity_models(
    access_token: str,
    project_id: str | None = None,
    settings: Settings | None = None,
) -> Any:
    """Fetch the raw model availability payload."""
    settings = settings or Settings()
    return await request_json(
        "POST",
        f"{settings.ag_base_url.rstrip('/')}{FETCH_MODELS_PATH}",
        operation="fetchAvailableModels",
        timeout=settings.request_timeout,
        headers={"Authorization": f"Bearer {access_token}", **ANTIGRAVITY_HEADERS},
        json_body=_project_body(project_id),
    )


async def fetch_gemini_cli_quota(
    access_token: str,
    project_id: str | None = None,
    settings: Settings | None = None,
) -> Any:
    """Fetch the raw Gemini CLI quota bucket payload."""
    settings = settings or Settings()
    user_agent = (
        f"GeminiCLI/1.0.0/gemini-2.5-pro ({platform.system().lower()}; {platform.machine()})"
    )
    return await request_json(
        "POST",
        f"{settings.ag_base_url.rstrip('/')}{RETRIEVE_QUOTA_PATH}",
        operation="retrieveUserQuota",
        timeout=settings.request_timeout,
        headers={"Authorization": f"Bearer {access_token}", "User-Agent": user_agent},
        json_body=_project_body(project_id),
    )
