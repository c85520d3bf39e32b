from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from app.hive.constants import DEFAULT_BEACON_POINT_RULES, DEFAULT_TIER_BREAKPOINTS
from app.hive.errors import HiveConfigurationError
from app.hive.tiers import validate_breakpoints
from app.hive.types import TierBreakpoint


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _load_json(raw: str, *, setting_name: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HiveConfigurationError(f"{setting_name} is not valid JSON") from exc


def parse_beacon_point_rules(raw: str) -> dict[str, str]:
    if not raw.strip():
        return dict(DEFAULT_BEACON_POINT_RULES)

    payload = _load_json(raw, setting_name="BEACON_POINT_RULES_JSON")
    if not isinstance(payload, dict):
        raise HiveConfigurationError("BEACON_POINT_RULES_JSON must be a JSON object")
    # Values stay as strings; the calculator rejects non-integers on use.
    return {str(slug): str(value) for slug, value in payload.items()}


def parse_tier_table(raw: str) -> tuple[TierBreakpoint, ...]:
    if not raw.strip():
        return DEFAULT_TIER_BREAKPOINTS

    payload = _load_json(raw, setting_name="HIVE_TIER_TABLE_JSON")
    if not isinstance(payload, list):
        raise HiveConfigurationError("HIVE_TIER_TABLE_JSON must be a JSON array")

    breakpoints: list[TierBreakpoint] = []
    for row in payload:
        if not isinstance(row, dict):
            raise HiveConfigurationError("HIVE_TIER_TABLE_JSON rows must be objects")
        try:
            breakpoints.append(
                TierBreakpoint(
                    tier=int(row["tier"]),
                    name=str(row["name"]),
                    min_points=int(row["min_points"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise HiveConfigurationError(f"invalid tier table row: {row!r}") from exc

    table = tuple(breakpoints)
    validate_breakpoints(table)
    return table


class SettingsBeaconRules:
    """Rule-table snapshot source backed by ``Settings.beacon_point_rules_json``."""

    def __init__(self, settings: Any) -> None:
        self._raw = getattr(settings, "beacon_point_rules_json", "") or ""

    def __call__(self) -> Mapping[str, str]:
        return parse_beacon_point_rules(self._raw)


class SettingsTierTable:
    def __init__(self, settings: Any) -> None:
        self._raw = getattr(settings, "hive_tier_table_json", "") or ""

    def __call__(self) -> tuple[TierBreakpoint, ...]:
        return parse_tier_table(self._raw)
