"""Antigravity (Google Cloud Code) schemas.

The accounts file and OAuth token response are validated strictly. The two
quota payloads are parsed leniently in ``aggregators.quota`` instead, since
malformed entries there only degrade the result.
"""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AntigravityAccount(BaseModel):
    """One account entry from ``antigravity-accounts.json``."""
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    refresh_token: Optional[str] = Field(None, alias="refreshToken")
    project_id: Optional[str] = Field(None, alias="projectId")
    enabled: Optional[bool] = None

    @property
    def is_enabled(self) -> bool:
        return self.enabled is not False


class AntigravityAccountsFile(BaseModel):
    version: int = 1
    accounts: list[AntigravityAccount] = Field(default_factory=list)
    activeIndex: Optional[int] = None
    activeIndexByFamily: Optional[dict[str, int]] = None


class OAuthTokenResponse(BaseModel):
    access_token: str
    expires_in: Optional[int] = None
    token_type: Optional[str] = None


class AntigravityModel(BaseModel):
    model: str
    remaining_fraction: Optional[float] = None
    remaining_pct: Optional[int] = None
    reset_time: Optional[str] = None


class GeminiCliBucket(BaseModel):
    model: str = "unknown"
    token_type: Optional[str] = None
    remaining_fraction: Optional[float] = None
    remaining_pct: Optional[int] = None
    remaining_amount: Optional[str] = None
    reset_time: Optional[str] = None


class AccountQuotaResult(BaseModel):
    """Quota for one account; ``errors`` collects every failure on the way."""
    model_config = ConfigDict(populate_by_name=True)

    account_index: int
    email: str
    enabled: bool
    project_id: Optional[str] = Field(None, serialization_alias="projectId")
    antigravity_models: list[AntigravityModel] = Field(default_factory=list)
    gemini_cli_quota: list[GeminiCliBucket] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class ModelSummary(BaseModel):
    best_remaining_pct: int = -1
    accounts_available: int = 0


class AllAccountsQuotaResult(BaseModel):
    total_accounts: int
    enabled_accounts: int
    accounts: list[AccountQuotaResult]
    summary: dict[str, ModelSummary]
