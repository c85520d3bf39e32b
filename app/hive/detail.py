from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Sequence
from datetime import datetime
from typing import TypeVar

import structlog

from app.hive.access import ensure_can_view
from app.hive.beacon import compute_beacon_points
from app.hive.constants import BEACON_PRODUCT_SLUGS
from app.hive.errors import HiveDependencyError, HiveError, HiveNotFoundError
from app.hive.masking import mask_wallet_address
from app.hive.ports import (
    AccountLookup,
    AncestorLookup,
    BeaconRulesProvider,
    Clock,
    HiveLookup,
    ProductTokenLookup,
    PurchaseLookup,
    TierTableProvider,
)
from app.hive.rules import utc_now
from app.hive.tiers import resolve_tier
from app.hive.types import (
    Account,
    HiveRecord,
    MemberDetailRequest,
    MemberDetailResponse,
    ResolvedTier,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def _guarded(operation: str, awaitable: Awaitable[T]) -> T:
    try:
        return await awaitable
    except HiveError:
        raise
    except Exception as exc:
        raise HiveDependencyError(f"{operation} failed") from exc


class HiveMemberDetailResolver:
    """Builds the detail view of one hive member for an authorized requester.

    Each collaborator is a small capability (see ``app.hive.ports``), so the
    same resolver runs against the database and remote services in
    production and against in-memory fakes in tests.
    """

    def __init__(
        self,
        *,
        hives: HiveLookup,
        ancestors: AncestorLookup,
        accounts: AccountLookup,
        product_tokens: ProductTokenLookup,
        purchases: PurchaseLookup,
        beacon_rules: BeaconRulesProvider,
        tier_table: TierTableProvider,
        clock: Clock = utc_now,
        product_slugs: Sequence[str] = BEACON_PRODUCT_SLUGS,
    ) -> None:
        self._hives = hives
        self._ancestors = ancestors
        self._accounts = accounts
        self._product_tokens = product_tokens
        self._purchases = purchases
        self._beacon_rules = beacon_rules
        self._tier_table = tier_table
        self._clock = clock
        self._product_slugs = list(product_slugs)

    async def resolve(self, request: MemberDetailRequest) -> MemberDetailResponse:
        log = logger.bind(
            hive_id=request.hive_id,
            requester_id=request.current_user_id,
            is_testing=request.is_testing,
        )
        try:
            response = await self._resolve(request)
        except HiveError as exc:
            log.warning("hive_member_detail_failed", error_code=exc.code, reason=str(exc))
            raise

        log.info(
            "hive_member_detail_resolved",
            account_id=response.account_id,
            beacon_points=response.beacon_points,
            tier=response.tier,
            is_trial=response.is_trial,
        )
        return response

    async def _resolve(self, request: MemberDetailRequest) -> MemberDetailResponse:
        hive = await _guarded(
            "hive lookup",
            self._hives.get_one(hive_id=request.hive_id, is_testing=request.is_testing),
        )
        if hive is None:
            raise HiveNotFoundError(f"hive {request.hive_id} not found")

        await ensure_can_view(
            hive,
            requester_id=request.current_user_id,
            is_testing=request.is_testing,
            ancestors=self._ancestors,
        )

        accounts_by_id = await self._load_accounts(hive)
        owner = accounts_by_id.get(hive.account_id)
        if owner is None:
            raise HiveDependencyError(
                f"account {hive.account_id} missing from account lookup for hive {hive.id}"
            )

        # The purchase lookup only needs the owner's wallet, so it overlaps
        # with the token lookup and scoring below.
        purchase_task = asyncio.create_task(self._last_purchase_at(owner))
        try:
            beacon_points = await self._beacon_points(owner, is_testing=request.is_testing)
            is_trial = self._is_trial(hive)
            tier = resolve_tier(beacon_points, is_trial, self._tier_table())
        except BaseException:
            purchase_task.cancel()
            await asyncio.gather(purchase_task, return_exceptions=True)
            raise
        last_purchase_at = await purchase_task

        return self._build_response(
            hive=hive,
            owner=owner,
            referrer_username=self._referrer_username(hive, accounts_by_id),
            beacon_points=beacon_points,
            tier=tier,
            is_trial=is_trial,
            last_purchase_at=last_purchase_at,
        )

    async def _load_accounts(self, hive: HiveRecord) -> dict[int, Account]:
        account_ids = [hive.account_id]
        if hive.has_referrer:
            account_ids.append(hive.referrer_account_id)

        accounts = await _guarded("account lookup", self._accounts.get_accounts(account_ids))
        return {account.id: account for account in accounts}

    async def _beacon_points(self, owner: Account, *, is_testing: bool) -> int:
        tokens = await _guarded(
            "product token lookup",
            self._product_tokens.get_owned_tokens(
                owner_address=owner.wallet_public_key,
                product_slugs=self._product_slugs,
                is_testing=is_testing,
            ),
        )
        return compute_beacon_points(tokens, self._beacon_rules())

    async def _last_purchase_at(self, owner: Account) -> datetime | None:
        purchase = await _guarded(
            "purchase lookup",
            self._purchases.latest_purchase(
                account_id=owner.id,
                wallet_address=owner.wallet_public_key,
            ),
        )
        if purchase is None:
            return None
        return purchase.trx_at

    def _is_trial(self, hive: HiveRecord) -> bool:
        if hive.trial_ended_at is None:
            return False
        return hive.trial_ended_at > self._clock()

    @staticmethod
    def _referrer_username(hive: HiveRecord, accounts_by_id: dict[int, Account]) -> str:
        if not hive.has_referrer:
            return ""
        referrer = accounts_by_id.get(hive.referrer_account_id)
        if referrer is None:
            return ""
        return referrer.username

    @staticmethod
    def _build_response(
        *,
        hive: HiveRecord,
        owner: Account,
        referrer_username: str,
        beacon_points: int,
        tier: ResolvedTier,
        is_trial: bool,
        last_purchase_at: datetime | None,
    ) -> MemberDetailResponse:
        return MemberDetailResponse(
            hive_id=hive.id,
            account_id=hive.account_id,
            account_wallet_public_key=mask_wallet_address(owner.wallet_public_key),
            username=owner.username,
            referrer_account_id=hive.referrer_account_id,
            referrer_username=referrer_username,
            beacon_points=beacon_points,
            tier=tier.tier,
            tier_name=tier.name,
            active_status=hive.active_status,
            last_purchase_at=last_purchase_at,
            is_trial=is_trial,
        )
