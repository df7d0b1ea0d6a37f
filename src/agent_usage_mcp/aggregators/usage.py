"""Z.AI usage aggregation.

``get_usage`` is all-or-nothing: the three facets are only meaningful
together, so any failed facet fails the whole call.
"""
from __future__ import annotations
import asyncio
from typing import Any

from agent_usage_mcp.api import zai
from agent_usage_mcp.config import Settings
from agent_usage_mcp.models.zai import (
    FullUsageResult,
    ModelUsageResult,
    QuotaResult,
    ToolUsageResult,
)
from agent_usage_mcp.outcome import settle
from agent_usage_mcp.utils.time import validate_hours


async def get_quota(settings: Settings | None = None) -> QuotaResult:
    return await zai.fetch_quota(settings)


async def get_model_usage(hours: Any = None, settings: Settings | None = None) -> ModelUsageResult:
    return await zai.fetch_model_usage(validate_hours(hours), settings)


async def get_tool_usage(hours: Any = None, settings: Settings | None = None) -> ToolUsageResult:
    return await zai.fetch_tool_usage(validate_hours(hours), settings)


async def get_usage(hours: Any = None, settings: Settings | None = None) -> FullUsageResult:
    """Fetch quota, model usage and tool usage concurrently.

    Raises:
        InvalidArgumentError: If ``hours`` is invalid (before any request)
        AgentUsageError: The first failure among the three facets
    """
    valid_hours = validate_hours(hours)
    settings = settings or Settings()

    quota, model_usage, tool_usage = await asyncio.gather(
        settle(get_quota(settings)),
        settle(get_model_usage(valid_hours, settings)),
        settle(get_tool_usage(valid_hours, settings)),
    )

    return FullUsageResult(
        quota=quota.unwrap(),
        model_usage=model_usage.unwrap(),
        tool_usage=tool_usage.unwrap(),
    )
