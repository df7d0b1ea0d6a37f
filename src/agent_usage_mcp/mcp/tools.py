# Tool registry for MCP server
from __future__ import annotations

from typing import Any, Callable, Awaitable

from pydantic import BaseModel

from agent_usage_mcp.aggregators import quota, usage
from agent_usage_mcp.errors import UnknownToolError
from agent_usage_mcp.mcp.schemas import TOOL_SCHEMAS

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]

TOOL_REGISTRY: dict[str, ToolHandler] = {}

def tool(name: str):
    def deco(fn):
        if name not in TOOL_SCHEMAS:
            raise KeyError(f"No schema defined for tool {name}")
        TOOL_REGISTRY[name] = fn
        return fn
    return deco


def _dump(result: BaseModel, exclude_none: bool = False) -> dict[str, Any]:
    return result.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)


@tool("get_usage")
async def get_usage(arguments: dict[str, Any]) -> dict[str, Any]:
    return _dump(await usage.get_usage(arguments.get("hours")), exclude_none=True)


@tool("get_quota")
async def get_quota(arguments: dict[str, Any]) -> dict[str, Any]:
    return _dump(await usage.get_quota(), exclude_none=True)


@tool("get_model_usage")
async def get_model_usage(arguments: dict[str, Any]) -> dict[str, Any]:
    return _dump(await usage.get_model_usage(arguments.get("hours")), exclude_none=True)


@tool("get_tool_usage")
async def get_tool_usage(arguments: dict[str, Any]) -> dict[str, Any]:
    return _dump(await usage.get_tool_usage(arguments.get("hours")), exclude_none=True)


@tool("get_antigravity_quota")
async def get_antigravity_quota(arguments: dict[str, Any]) -> dict[str, Any]:
    """All configured accounts plus the cross-account summary."""
    return _dump(await quota.get_all())


@tool("get_antigravity_account_quota")
async def get_antigravity_account_quota(arguments: dict[str, Any]) -> dict[str, Any]:
    """A single account by email or 0-based index."""
    return _dump(await quota.get_one(arguments.get("account")))


def list_tools() -> list[dict[str, Any]]:
    """Descriptors for every registered tool, in registration order."""
    return [
        {
            "name": name,
            "description": TOOL_SCHEMAS[name]["description"],
            "inputSchema": TOOL_SCHEMAS[name]["inputSchema"],
        }
        for name in TOOL_REGISTRY
    ]


async def execute_tool(name: Any, arguments: dict[str, Any]) -> Any:
    """Run a registered tool.

    Raises:
        UnknownToolError: If ``name`` is not registered
    """
    handler = TOOL_REGISTRY.get(name) if isinstance(name, str) else None
    if handler is None:
        raise UnknownToolError(name)
    return await handler(arguments)
