from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class HiveRecord:
    id: int
    account_id: int
    referrer_account_id: int
    beacon_points: int
    active_status: bool
    trial_ended_at: datetime | None = None
    is_testing: bool = False

    @property
    def has_referrer(self) -> bool:
        return self.referrer_account_id != 0


@dataclass(frozen=True, slots=True)
class AncestorEdge:
    account_id: int
    ancestor_account_id: int
    is_testing: bool = False


@dataclass(frozen=True, slots=True)
class Account:
    id: int
    wallet_public_key: str
    username: str


@dataclass(frozen=True, slots=True)
class ProductToken:
    token_id: int
    product_id: int
    product_slug: str


@dataclass(frozen=True, slots=True)
class PurchaseRecord:
    id: int
    account_id: int
    address: str
    trx_at: datetime


@dataclass(frozen=True, slots=True)
class TierBreakpoint:
    tier: int
    name: str
    min_points: int


@dataclass(frozen=True, slots=True)
class ResolvedTier:
    tier: int
    name: str

    @classmethod
    def none(cls) -> ResolvedTier:
        return cls(tier=0, name="")


@dataclass(frozen=True, slots=True)
class MemberDetailRequest:
    hive_id: int
    current_user_id: int
    is_testing: bool


@dataclass(frozen=True, slots=True)
class MemberDetailResponse:
    hive_id: int
    account_id: int
    account_wallet_public_key: str
    username: str
    referrer_account_id: int
    referrer_username: str
    beacon_points: int
    tier: int
    tier_name: str
    active_status: bool
    last_purchase_at: datetime | None
    is_trial: bool
