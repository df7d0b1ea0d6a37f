"""Configuration management for the agent usage MCP server.

Loads settings from environment variables using python-dotenv.
"""
from __future__ import annotations
import os
from pathlib import Path
from dotenv import load_dotenv

from agent_usage_mcp import __version__

# Load .env file
load_dotenv()

# Public OAuth client id of the Antigravity IDE plugin
DEFAULT_AG_CLIENT_ID = (
    "1071006060591-tmhssin2h21lcre235vtolojh4g403ep.apps.googleusercontent.com"
)


def _default_accounts_file() -> Path:
    return Path.home() / ".config" / "opencode" / "antigravity-accounts.json"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize settings from environment variables."""
        # Z.AI
        self.zai_api_key = os.getenv("OC_ZAI_API_KEY") or None
        self.zai_base_url = os.getenv("ZAI_BASE_URL", "https://api.z.ai")

        # Antigravity (Google Cloud Code)
        self.ag_client_id = os.getenv("AG_CLIENT_ID", DEFAULT_AG_CLIENT_ID)
        self.ag_client_secret = os.getenv("AG_CLIENT_SECRET") or None
        self.ag_token_url = os.getenv("AG_TOKEN_URL", "https://oauth2.googleapis.com/token")
        self.ag_base_url = os.getenv("AG_BASE_URL", "https://cloudcode-pa.googleapis.com")
        accounts_file = os.getenv("AG_ACCOUNTS_FILE")
        self.ag_accounts_file = (
            Path(accounts_file).expanduser() if accounts_file else _default_accounts_file()
        )

        # Server
        self.server_name = os.getenv("MCP_SERVER_NAME", "zai-usage")
        self.server_version = __version__
        self.request_timeout = float(os.getenv("REQUEST_TIMEOUT", "15"))
        self.log_level = os.getenv("LOG_LEVEL", "WARNING").upper()
