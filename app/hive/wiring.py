from __future__ import annotations

from typing import Any

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.clients.accounts import AccountsClient
from app.clients.product_tokens import ProductTokensClient
from app.db.models.hives import Hive
from app.db.repo.flat_hives_repo import FlatHivesRepo
from app.db.repo.hives_repo import HivesRepo
from app.db.repo.transactions_repo import TransactionsRepo
from app.hive.detail import HiveMemberDetailResolver
from app.hive.rules import SettingsBeaconRules, SettingsTierTable, utc_now
from app.hive.types import HiveRecord, PurchaseRecord


def _to_hive_record(row: Hive) -> HiveRecord:
    return HiveRecord(
        id=int(row.id),
        account_id=int(row.account_id),
        referrer_account_id=int(row.referrer_account_id or 0),
        beacon_points=int(row.beacon_points),
        active_status=bool(row.active_status),
        trial_ended_at=row.trial_ended_at,
        is_testing=bool(row.is_testing),
    )


class SqlHiveLookup:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_one(self, *, hive_id: int, is_testing: bool) -> HiveRecord | None:
        row = await HivesRepo.get_one(self._session, hive_id=hive_id, is_testing=is_testing)
        if row is None:
            return None
        return _to_hive_record(row)


class SqlAncestorLookup:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def has_ancestor(
        self,
        *,
        account_id: int,
        ancestor_account_id: int,
        is_testing: bool,
    ) -> bool:
        return await FlatHivesRepo.has_ancestor(
            self._session,
            account_id=account_id,
            ancestor_account_id=ancestor_account_id,
            is_testing=is_testing,
        )


class SqlPurchaseLookup:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def latest_purchase(
        self,
        *,
        account_id: int,
        wallet_address: str,
    ) -> PurchaseRecord | None:
        rows = await TransactionsRepo.list_for_account(
            self._session,
            account_id=account_id,
            address=wallet_address,
            sort_by="trx_at",
            descending=True,
            limit=1,
        )
        if not rows:
            return None
        row = rows[0]
        return PurchaseRecord(
            id=int(row.id),
            account_id=int(row.account_id),
            address=str(row.address),
            trx_at=row.trx_at,
        )


def build_member_detail_resolver(
    session: AsyncSession,
    *,
    http_client: httpx.AsyncClient,
    settings: Any,
) -> HiveMemberDetailResolver:
    # Only the purchase lookup touches the session while the token lookup is
    # in flight, so the session is never used by two tasks at once.
    return HiveMemberDetailResolver(
        hives=SqlHiveLookup(session),
        ancestors=SqlAncestorLookup(session),
        accounts=AccountsClient(
            http_client,
            base_url=settings.accounts_api_url,
            token=settings.internal_api_token,
        ),
        product_tokens=ProductTokensClient(
            http_client,
            base_url=settings.product_tokens_api_url,
            token=settings.internal_api_token,
        ),
        purchases=SqlPurchaseLookup(session),
        beacon_rules=SettingsBeaconRules(settings),
        tier_table=SettingsTierTable(settings),
        clock=utc_now,
    )
