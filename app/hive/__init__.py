from __future__ import annotations

from .access import ensure_can_view
from .beacon import compute_beacon_points
from .detail import HiveMemberDetailResolver
from .errors import (
    HiveAccessError,
    HiveConfigurationError,
    HiveDependencyError,
    HiveError,
    HiveIntegrityError,
    HiveNotFoundError,
)
from .masking import mask_wallet_address
from .tiers import resolve_tier
from .types import (
    Account,
    HiveRecord,
    MemberDetailRequest,
    MemberDetailResponse,
    ProductToken,
    PurchaseRecord,
    ResolvedTier,
    TierBreakpoint,
)

__all__ = [
    "Account",
    "HiveAccessError",
    "HiveConfigurationError",
    "HiveDependencyError",
    "HiveError",
    "HiveIntegrityError",
    "HiveMemberDetailResolver",
    "HiveNotFoundError",
    "HiveRecord",
    "MemberDetailRequest",
    "MemberDetailResponse",
    "ProductToken",
    "PurchaseRecord",
    "ResolvedTier",
    "TierBreakpoint",
    "compute_beacon_points",
    "ensure_can_view",
    "mask_wallet_address",
    "resolve_tier",
]
