"""Z.AI monitor API schemas.

Response models validate the raw payloads; result models are what the
tools return.
"""
from __future__ import annotations
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field

# Counts stay ints when upstream sends ints
Number = Union[int, float]


# Upstream responses


class QuotaLimitPayload(BaseModel):
    type: str
    percentage: Optional[Number] = None
    used: Optional[Number] = None
    total: Optional[Number] = None


class QuotaData(BaseModel):
    limits: list[QuotaLimitPayload]


class QuotaResponse(BaseModel):
    data: Optional[QuotaData] = None


class ModelUsagePayload(BaseModel):
    modelName: Optional[str] = None
    model: Optional[str] = None
    totalTokensUsage: Optional[Number] = None
    tokensUsage: Optional[Number] = None
    inputTokensUsage: Optional[Number] = None
    outputTokensUsage: Optional[Number] = None


class ModelTotalUsage(BaseModel):
    totalTokensUsage: Optional[Number] = None


class ModelUsageData(BaseModel):
    totalUsage: Optional[ModelTotalUsage] = None
    modelUsages: Optional[list[ModelUsagePayload]] = None


class ModelUsageResponse(BaseModel):
    data: Optional[ModelUsageData] = None


class ToolTotalUsage(BaseModel):
    totalNetworkSearchCount: Optional[Number] = None
    totalWebReadMcpCount: Optional[Number] = None


class ToolUsageData(BaseModel):
    totalUsage: Optional[ToolTotalUsage] = None


class ToolUsageResponse(BaseModel):
    data: Optional[ToolUsageData] = None


# Tool results


class QuotaLimit(BaseModel):
    type: str
    percentage: Number = 0
    used: Optional[Number] = None
    total: Optional[Number] = None


class QuotaResult(BaseModel):
    limits: list[QuotaLimit] = Field(default_factory=list)


class ModelUsage(BaseModel):
    model: str
    tokens: Number = 0
    input_tokens: Number = 0
    output_tokens: Number = 0


class ModelUsageResult(BaseModel):
    period_hours: Number
    total_tokens: Optional[Number] = None
    models: list[ModelUsage] = Field(default_factory=list)


class ToolUsageResult(BaseModel):
    period_hours: Number
    web_search_count: Number = 0
    web_reader_count: Number = 0


class FullUsageResult(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    quota: QuotaResult
    model_usage: ModelUsageResult
    tool_usage: ToolUsageResult
