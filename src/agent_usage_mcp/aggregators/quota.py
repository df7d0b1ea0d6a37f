"""Antigravity multi-account quota aggregation.

Each account runs through the same pipeline:

    enabled check -> refresh token check -> token refresh
        -> model availability + Gemini CLI quota (concurrently)

Failures inside the pipeline are recorded on that account's ``errors``
list and never abort other accounts or the overall aggregation. Only a
missing/empty account store or an unresolvable identifier fails the call.
"""
from __future__ import annotations
import asyncio
import logging
import math
import re
from typing import Any

from agent_usage_mcp.api import antigravity
from agent_usage_mcp.config import Settings
from agent_usage_mcp.errors import AccountIndexError, AccountNotFoundError, InvalidArgumentError
from agent_usage_mcp.models.antigravity import (
    AccountQuotaResult,
    AllAccountsQuotaResult,
    AntigravityAccount,
    AntigravityModel,
    GeminiCliBucket,
    ModelSummary,
)
from agent_usage_mcp.outcome import Failure, settle

logger = logging.getLogger(__name__)

NUMERIC_STRING_RE = re.compile(r"[0-9]+")
GEMINI_CLI_PREFIX = "gemini-cli:"


# Payload parsing


def _fraction(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        fraction = float(value)
    except OverflowError:
        # ints beyond float range
        return None
    return fraction if math.isfinite(fraction) else None


def remaining_pct(fraction: float | None) -> int | None:
    """Percentage rounded half up, mirroring the fraction's nullness."""
    if fraction is None:
        return None
    scaled = fraction * 100 + 0.5
    if not math.isfinite(scaled):
        return None
    return math.floor(scaled)


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_antigravity_models(data: Any) -> list[AntigravityModel]:
    """Parse a fetchAvailableModels payload: ``{"models": {name: {"quotaInfo": ...}}}``."""
    if not isinstance(data, dict):
        return []
    models = data.get("models")
    if not isinstance(models, dict):
        return []

    entries = []
    for name, info in models.items():
        quota_info = info.get("quotaInfo") if isinstance(info, dict) else None
        if not isinstance(quota_info, dict):
            entries.append(AntigravityModel(model=str(name)))
            continue
        fraction = _fraction(quota_info.get("remainingFraction"))
        entries.append(
            AntigravityModel(
                model=str(name),
                remaining_fraction=fraction,
                remaining_pct=remaining_pct(fraction),
                reset_time=_str_or_none(quota_info.get("resetTime")),
            )
        )
    return entries


def parse_gemini_cli_quota(data: Any) -> list[GeminiCliBucket]:
    """Parse a retrieveUserQuota payload: ``{"buckets": [{modelId, remainingFraction, ...}]}``.

    Non-object bucket entries are skipped.
    """
    if not isinstance(data, dict):
        return []
    buckets = data.get("buckets")
    if not isinstance(buckets, list):
        return []

    entries = []
    for bucket in buckets:
        if not isinstance(bucket, dict):
            continue
        fraction = _fraction(bucket.get("remainingFraction"))
        entries.append(
            GeminiCliBucket(
                model=_str_or_none(bucket.get("modelId")) or "unknown",
                token_type=_str_or_none(bucket.get("tokenType")),
                remaining_fraction=fraction,
                remaining_pct=remaining_pct(fraction),
                remaining_amount=_str_or_none(bucket.get("remainingAmount")),
                reset_time=_str_or_none(bucket.get("resetTime")),
            )
        )
    return entries


# Per-account pipeline


async def get_account_quota(
    account: AntigravityAccount,
    index: int,
    settings: Settings | None = None,
) -> AccountQuotaResult:
    """Compute one account's quota, recording every failure on the result."""
    settings = settings or Settings()
    result = AccountQuotaResult(
        account_index=index,
        email=account.email or f"account_{index}",
        enabled=account.is_enabled,
        project_id=account.project_id or None,
    )

    if not result.enabled:
        result.errors.append("Account is disabled")
        return result

    if not account.refresh_token:
        result.errors.append("No refresh token stored for this account")
        return result

    token = await settle(antigravity.refresh_access_token(account.refresh_token, settings))
    if isinstance(token, Failure):
        logger.warning(f"Token refresh failed for {result.email}: {token.message}")
        result.errors.append(f"Token refresh failed: {token.message}")
        return result
    access_token = token.value

    models, buckets = await asyncio.gather(
        settle(_load_models(access_token, account.project_id, settings)),
        settle(_load_buckets(access_token, account.project_id, settings)),
    )

    # Best effort: each field degrades on its own
    if isinstance(models, Failure):
        logger.warning(f"Antigravity models failed for {result.email}: {models.message}")
        result.errors.append(f"Antigravity models: {models.message}")
    else:
        result.antigravity_models = models.value

    if isinstance(buckets, Failure):
        logger.warning(f"Gemini CLI quota failed for {result.email}: {buckets.message}")
        result.errors.append(f"Gemini CLI quota: {buckets.message}")
    else:
        result.gemini_cli_quota = buckets.value

    return result


# Fetch and parse run as one unit so a bad payload fails like a bad fetch


async def _load_models(access_token: str, project_id: str | None, settings: Settings) -> list[AntigravityModel]:
    data = await antigravity.fetch_antigravity_models(access_token, project_id, settings)
    return parse_antigravity_models(data)


async def _load_buckets(access_token: str, project_id: str | None, settings: Settings) -> list[GeminiCliBucket]:
    data = await antigravity.fetch_gemini_cli_quota(access_token, project_id, settings)
    return parse_gemini_cli_quota(data)


# Aggregation


def _fold(summary: dict[str, ModelSummary], key: str, pct: int | None) -> None:
    entry = summary.setdefault(key, ModelSummary())
    if pct is not None and pct > 0:
        entry.accounts_available += 1
        entry.best_remaining_pct = max(entry.best_remaining_pct, pct)


def build_summary(results: list[AccountQuotaResult]) -> dict[str, ModelSummary]:
    """Summarize the best remaining percentage per model across enabled accounts."""
    summary: dict[str, ModelSummary] = {}
    for account in results:
        if not account.enabled:
            continue
        for model in account.antigravity_models:
            _fold(summary, model.model, model.remaining_pct)
        for bucket in account.gemini_cli_quota:
            _fold(summary, f"{GEMINI_CLI_PREFIX}{bucket.model}", bucket.remaining_pct)
    return summary


async def get_all(settings: Settings | None = None) -> AllAccountsQuotaResult:
    """Quota for every configured account plus a cross-account summary.

    Raises:
        NoAccountsConfiguredError: If no accounts are configured
    """
    settings = settings or Settings()
    accounts = antigravity.load_accounts(settings)

    results = await asyncio.gather(
        *(get_account_quota(account, i, settings) for i, account in enumerate(accounts))
    )
    results = list(results)

    return AllAccountsQuotaResult(
        total_accounts=len(accounts),
        enabled_accounts=sum(1 for a in accounts if a.is_enabled),
        accounts=results,
        summary=build_summary(results),
    )


def resolve_account_index(identifier: Any, accounts: list[AntigravityAccount]) -> int:
    """Resolve an index or email to a position in ``accounts``.

    Raises:
        InvalidArgumentError: If no identifier was given
        AccountNotFoundError: If no account email matches
        AccountIndexError: If the index is out of range
    """
    if identifier is None:
        raise InvalidArgumentError("Missing required argument: account")

    if isinstance(identifier, bool):
        raise InvalidArgumentError(f"Invalid account identifier: {identifier}")

    if isinstance(identifier, int):
        index = identifier
    elif isinstance(identifier, float):
        if not identifier.is_integer():
            raise InvalidArgumentError(f"Invalid account index: {identifier}")
        index = int(identifier)
    elif isinstance(identifier, str) and NUMERIC_STRING_RE.fullmatch(identifier):
        index = int(identifier)
    else:
        wanted = str(identifier).lower()
        matches = [
            i for i, a in enumerate(accounts)
            if a.email and a.email.lower() == wanted
        ]
        if not matches:
            raise AccountNotFoundError(f"Account not found: {identifier}")
        index = matches[0]

    if index < 0 or index >= len(accounts):
        raise AccountIndexError(
            f"Account index {index} out of range (0-{len(accounts) - 1})"
        )
    return index


async def get_one(identifier: Any, settings: Settings | None = None) -> AccountQuotaResult:
    """Quota for a single account, by 0-based index or email."""
    settings = settings or Settings()
    accounts = antigravity.load_accounts(settings)
    index = resolve_account_index(identifier, accounts)
    return await get_account_quota(accounts[index], index, settings)
