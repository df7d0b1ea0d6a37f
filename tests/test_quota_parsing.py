"""Tests for Antigravity payload parsing and cross-account summaries."""
import json

import pytest

from agent_usage_mcp.aggregators.quota import (
    build_summary,
    parse_antigravity_models,
    parse_gemini_cli_quota,
    remaining_pct,
)
from agent_usage_mcp.models.antigravity import (
    AccountQuotaResult,
    AntigravityModel,
    GeminiCliBucket,
)


def test_parse_antigravity_models():
    payload = {
        "models": {
            "gemini-3-pro-high": {
                "quotaInfo": {"remainingFraction": 0.734, "resetTime": "2026-01-01T00:00:00Z"}
            },
            "claude-sonnet-4-5": {"quotaInfo": {}},
            "chat_20706": {"displayName": "no quota info"},
        }
    }

    models = parse_antigravity_models(payload)

    assert [m.model_dump() for m in models] == [
        {
            "model": "gemini-3-pro-high",
            "remaining_fraction": 0.734,
            "remaining_pct": 73,
            "reset_time": "2026-01-01T00:00:00Z",
        },
        {"model": "claude-sonnet-4-5", "remaining_fraction": None, "remaining_pct": None, "reset_time": None},
        {"model": "chat_20706", "remaining_fraction": None, "remaining_pct": None, "reset_time": None},
    ]


@pytest.mark.parametrize("payload", [None, [], "oops", {}, {"models": None}, {"models": ["a", "b"]}])
def test_parse_antigravity_models_malformed(payload):
    assert parse_antigravity_models(payload) == []


def test_parse_antigravity_models_tolerates_bad_entries():
    payload = {
        "models": {
            "a": "not an object",
            "b": {"quotaInfo": "nope"},
            "c": {"quotaInfo": {"remainingFraction": "0.5", "resetTime": 123}},
        }
    }

    models = parse_antigravity_models(payload)

    assert [m.model for m in models] == ["a", "b", "c"]
    assert all(m.remaining_fraction is None and m.remaining_pct is None for m in models)
    assert models[2].reset_time is None


def test_parse_gemini_cli_quota():
    payload = {
        "buckets": [
            {
                "modelId": "gemini-2.5-pro",
                "tokenType": "REQUESTS",
                "remainingFraction": 1,
                "remainingAmount": "1000",
                "resetTime": "2026-01-01T00:00:00Z",
            },
            {"remainingFraction": 0.25},
            "garbage",
            None,
        ]
    }

    buckets = parse_gemini_cli_quota(payload)

    assert len(buckets) == 2
    assert buckets[0].model_dump() == {
        "model": "gemini-2.5-pro",
        "token_type": "REQUESTS",
        "remaining_fraction": 1.0,
        "remaining_pct": 100,
        "remaining_amount": "1000",
        "reset_time": "2026-01-01T00:00:00Z",
    }
    assert buckets[1].model == "unknown"
    assert buckets[1].remaining_pct == 25


@pytest.mark.parametrize("payload", [None, {}, {"buckets": {}}, {"buckets": "x"}])
def test_parse_gemini_cli_quota_malformed(payload):
    assert parse_gemini_cli_quota(payload) == []


@pytest.mark.parametrize("fraction, expected", [
    (None, None),
    (0, 0),
    (1, 100),
    (0.5, 50),
    (0.125, 13),
    (0.994, 99),
    (0.0049, 0),
])
def test_remaining_pct_rounds_half_up(fraction, expected):
    assert remaining_pct(fraction) == expected


@pytest.mark.parametrize("fraction", [10**400, -10**400, 1e308])
def test_out_of_range_fraction_has_no_percentage(fraction):
    models = parse_antigravity_models({"models": {"m": {"quotaInfo": {"remainingFraction": fraction}}}})
    buckets = parse_gemini_cli_quota({"buckets": [{"modelId": "m", "remainingFraction": fraction}]})

    assert models[0].remaining_pct is None
    assert buckets[0].remaining_pct is None


def test_huge_integer_fraction_from_json_is_dropped():
    payload = json.loads('{"buckets": [{"modelId": "m", "remainingFraction": 1' + "0" * 400 + "}]}")

    buckets = parse_gemini_cli_quota(payload)

    assert buckets[0].remaining_fraction is None
    assert buckets[0].remaining_pct is None


def test_boolean_fraction_is_not_a_number():
    models = parse_antigravity_models({"models": {"m": {"quotaInfo": {"remainingFraction": True}}}})
    assert models[0].remaining_fraction is None
    assert models[0].remaining_pct is None


def _account(index, enabled=True, models=(), buckets=()):
    return AccountQuotaResult(
        account_index=index,
        email=f"user{index}@example.com",
        enabled=enabled,
        antigravity_models=[AntigravityModel(model=m, remaining_pct=p) for m, p in models],
        gemini_cli_quota=[GeminiCliBucket(model=m, remaining_pct=p) for m, p in buckets],
    )


def test_build_summary_takes_best_and_counts_available():
    results = [
        _account(0, models=[("gemini-3-pro", 40)], buckets=[("gemini-2.5-pro", 0)]),
        _account(1, models=[("gemini-3-pro", 70)], buckets=[("gemini-2.5-pro", 20)]),
    ]

    summary = build_summary(results)

    assert summary["gemini-3-pro"].model_dump() == {"best_remaining_pct": 70, "accounts_available": 2}
    assert summary["gemini-cli:gemini-2.5-pro"].model_dump() == {"best_remaining_pct": 20, "accounts_available": 1}


def test_build_summary_keeps_sentinel_for_exhausted_models():
    results = [_account(0, models=[("exhausted", 0), ("unknown-quota", None)])]

    summary = build_summary(results)

    assert summary["exhausted"].model_dump() == {"best_remaining_pct": -1, "accounts_available": 0}
    assert summary["unknown-quota"].model_dump() == {"best_remaining_pct": -1, "accounts_available": 0}


def test_build_summary_skips_disabled_accounts():
    results = [
        _account(0, enabled=False, models=[("gemini-3-pro", 90), ("only-disabled", 50)]),
        _account(1, models=[("gemini-3-pro", 30)]),
    ]

    summary = build_summary(results)

    assert summary["gemini-3-pro"].model_dump() == {"best_remaining_pct": 30, "accounts_available": 1}
    assert "only-disabled" not in summary
