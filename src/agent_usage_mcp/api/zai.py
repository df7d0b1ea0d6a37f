"""Z.AI usage monitor client.

Each function performs exactly one GET against the monitor API and
reshapes the payload into a tool result model.
"""
from __future__ import annotations
import logging

from agent_usage_mcp.api.http import request_model
from agent_usage_mcp.config import Settings
from agent_usage_mcp.errors import ConfigError
from agent_usage_mcp.models.zai import (
    ModelUsage,
    ModelUsageResponse,
    ModelUsageResult,
    Number,
    QuotaLimit,
    QuotaResponse,
    QuotaResult,
    ToolUsageResponse,
    ToolUsageResult,
)
from agent_usage_mcp.utils.time import get_time_window

logger = logging.getLogger(__name__)

QUOTA_PATH = "/api/monitor/usage/quota/limit"
MODEL_USAGE_PATH = "/api/monitor/usage/model-usage"
TOOL_USAGE_PATH = "/api/monitor/usage/tool-usage"

QUOTA_TYPE_LABELS = {
    "TOKENS_LIMIT": "Token Usage (5h window)",
    "TIME_LIMIT": "MCP Usage (Monthly)",
}


def get_auth_headers(settings: Settings) -> dict[str, str]:
    """Build request headers for the monitor API.

    Raises:
        ConfigError: If OC_ZAI_API_KEY is not set
    """
    if not settings.zai_api_key:
        raise ConfigError("OC_ZAI_API_KEY environment variable is not set")
    return {
        "Authorization": f"Bearer {settings.zai_api_key}",
        "Accept-Language": "en-US,en",
        "Content-Type": "application/json",
    }


def _url(settings: Settings, path: str) -> str:
    return f"{settings.zai_base_url.rstrip('/')}{path}"


def _window_params(hours: float) -> dict[str, str]:
    start_time, end_time = get_time_window(hours)
    return {"startTime": start_time, "endTime": end_time}


def _first_number(*values: Number | None) -> Number:
    """First non-null count, or 0."""
    for value in values:
        if value is not None:
            return value
    return 0


async def fetch_quota(settings: Settings | None = None) -> QuotaResult:
    """Fetch current quota limits."""
    settings = settings or Settings()
    response = await request_model(
        "GET",
        _url(settings, QUOTA_PATH),
        QuotaResponse,
        timeout=settings.request_timeout,
        headers=get_auth_headers(settings),
    )

    limits = response.data.limits if response.data else []
    return QuotaResult(
        limits=[
            QuotaLimit(
                type=QUOTA_TYPE_LABELS.get(limit.type, limit.type),
                percentage=limit.percentage if limit.percentage is not None else 0,
                used=limit.used,
                total=limit.total,
            )
            for limit in limits
        ]
    )


async def fetch_model_usage(hours: float, settings: Settings | None = None) -> ModelUsageResult:
    """Fetch per-model token usage over the last ``hours`` hours."""
    settings = settings or Settings()
    response = await request_model(
        "GET",
        _url(settings, MODEL_USAGE_PATH),
        ModelUsageResponse,
        timeout=settings.request_timeout,
        headers=get_auth_headers(settings),
        params=_window_params(hours),
    )

    data = response.data
    models = (data.modelUsages or []) if data else []
    total_usage = data.totalUsage if data else None
    return ModelUsageResult(
        period_hours=hours,
        total_tokens=total_usage.totalTokensUsage if total_usage else None,
        models=[
            ModelUsage(
                model=m.modelName or m.model or "unknown",
                tokens=_first_number(m.totalTokensUsage, m.tokensUsage),
                input_tokens=_first_number(m.inputTokensUsage),
                output_tokens=_first_number(m.outputTokensUsage),
            )
            for m in models
        ],
    )


async def fetch_tool_usage(hours: float, settings: Settings | None = None) -> ToolUsageResult:
    """Fetch web search / web reader invocation counts over the last ``hours`` hours."""
    settings = settings or Settings()
    response = await request_model(
        "GET",
        _url(settings, TOOL_USAGE_PATH),
        ToolUsageResponse,
        timeout=settings.request_timeout,
        headers=get_auth_headers(settings),
        params=_window_params(hours),
    )

    total_usage = response.data.totalUsage if response.data else None
    return ToolUsageResult(
        period_hours=hours,
        web_search_count=_first_number(total_usage.totalNetworkSearchCount) if total_usage else 0,
        web_reader_count=_first_number(total_usage.totalWebReadMcpCount) if total_usage else 0,
    )
