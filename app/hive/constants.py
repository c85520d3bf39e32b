from __future__ import annotations

from app.hive.types import TierBreakpoint

BEACON_PRODUCT_SLUGS: tuple[str, ...] = (
    "bythen-chip",
    "bythen-pod",
    "bythen-card",
    "bythen-type01",
)

DEFAULT_BEACON_POINT_RULES: dict[str, str] = {
    "bythen-chip": "5",
    "bythen-pod": "10",
    "bythen-card": "25",
    "bythen-type01": "50",
}

DEFAULT_TIER_BREAKPOINTS: tuple[TierBreakpoint, ...] = (
    TierBreakpoint(tier=1, name="New Bee", min_points=1),
    TierBreakpoint(tier=2, name="Worker Bee", min_points=100),
    TierBreakpoint(tier=3, name="Busy Bee", min_points=500),
    TierBreakpoint(tier=4, name="Royal Bee", min_points=2000),
    TierBreakpoint(tier=5, name="Queen Bee", min_points=5000),
)

WALLET_MASK_PREFIX_LEN = 6
WALLET_MASK_SUFFIX_LEN = 4
WALLET_MASK_SEPARATOR = "..."
