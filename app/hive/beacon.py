from __future__ import annotations

from collections.abc import Iterable, Mapping

from app.hive.errors import HiveConfigurationError
from app.hive.types import ProductToken


def _parse_rule_value(slug: str, raw_value: str) -> int:
    try:
        return int(str(raw_value).strip())
    except ValueError as exc:
        raise HiveConfigurationError(
            f"beacon point rule for {slug!r} is not an integer: {raw_value!r}"
        ) from exc


def parse_rule_values(rules: Mapping[str, str]) -> dict[str, int]:
    return {slug: _parse_rule_value(slug, raw_value) for slug, raw_value in rules.items()}


def compute_beacon_points(
    tokens: Iterable[ProductToken],
    rules: Mapping[str, str],
) -> int:
    # The whole table is checked up front, even slugs the member does not own.
    parsed_rules = parse_rule_values(rules)
    # Every owned token counts, so two pods score twice.
    return sum(parsed_rules.get(token.product_slug, 0) for token in tokens)
