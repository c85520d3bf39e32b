from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from datetime import datetime
from typing import Protocol

from app.hive.types import Account, HiveRecord, ProductToken, PurchaseRecord, TierBreakpoint


class HiveLookup(Protocol):
    async def get_one(self, *, hive_id: int, is_testing: bool) -> HiveRecord | None:
        """Return the single matching hive, or raise HiveIntegrityError if several match."""
        ...


class AncestorLookup(Protocol):
    async def has_ancestor(
        self,
        *,
        account_id: int,
        ancestor_account_id: int,
        is_testing: bool,
    ) -> bool: ...


class AccountLookup(Protocol):
    async def get_accounts(self, account_ids: Collection[int]) -> list[Account]: ...


class ProductTokenLookup(Protocol):
    async def get_owned_tokens(
        self,
        *,
        owner_address: str,
        product_slugs: Sequence[str],
        is_testing: bool,
    ) -> list[ProductToken]: ...


class PurchaseLookup(Protocol):
    async def latest_purchase(
        self,
        *,
        account_id: int,
        wallet_address: str,
    ) -> PurchaseRecord | None: ...


class Clock(Protocol):
    def __call__(self) -> datetime: ...


class BeaconRulesProvider(Protocol):
    def __call__(self) -> Mapping[str, str]: ...


class TierTableProvider(Protocol):
    def __call__(self) -> Sequence[TierBreakpoint]: ...
