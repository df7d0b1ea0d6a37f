"""Exception hierarchy for the agent usage MCP server.

Every exception raised by a tool reaches the client as a JSON-RPC
application error carrying only ``str(exc)``, so messages must be
human-readable on their own.
"""
from __future__ import annotations


class AgentUsageError(Exception):
    """Base exception for all agent usage errors."""

    pass


class ConfigError(AgentUsageError):
    """A required credential or setting is missing."""

    pass


class InvalidArgumentError(AgentUsageError, ValueError):
    """A tool argument failed validation."""

    pass


class UnknownToolError(AgentUsageError):
    """No tool is registered under the requested name."""

    def __init__(self, name: object) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class AccountStoreError(AgentUsageError):
    """The Antigravity accounts file could not be read."""

    pass


class NoAccountsConfiguredError(AccountStoreError):
    """The accounts file is missing or lists no accounts."""

    pass


class AccountNotFoundError(AgentUsageError):
    """No account matches the given email."""

    pass


class AccountIndexError(AgentUsageError):
    """A resolved account index is outside the loaded list."""

    pass


class UpstreamError(AgentUsageError):
    """An outbound call failed, timed out, or returned an unusable body."""

    pass


class HttpError(UpstreamError):
    """An outbound call returned a non-200 status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


def error_message(exc: BaseException) -> str:
    """Return the client-facing message for an exception."""
    return str(exc) or type(exc).__name__
