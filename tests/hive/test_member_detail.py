from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import timedelta

import pytest

from app.clients.errors import UpstreamServiceError
from app.hive.errors import (
    HiveAccessError,
    HiveConfigurationError,
    HiveDependencyError,
    HiveIntegrityError,
    HiveNotFoundError,
)
from app.hive.types import (
    Account,
    HiveRecord,
    MemberDetailRequest,
    MemberDetailResponse,
    PurchaseRecord,
)
from tests.hive.hive_fixtures import (
    NOW_UTC,
    OWNER_WALLET,
    FakeAccounts,
    FakeAncestors,
    FakeHives,
    FakeProductTokens,
    FakePurchases,
    build_resolver,
    mystery_pod,
    owner_account,
    pod,
    referrer_account,
)

ALLOWED_SLUGS = ["bythen-chip", "bythen-pod", "bythen-card", "bythen-type01"]


def _referred_hive(**overrides: object) -> HiveRecord:
    base = HiveRecord(
        id=1,
        account_id=3,
        referrer_account_id=4,
        beacon_points=10,
        active_status=True,
        is_testing=True,
    )
    return replace(base, **overrides)


def _request(*, current_user_id: int) -> MemberDetailRequest:
    return MemberDetailRequest(hive_id=1, current_user_id=current_user_id, is_testing=True)


@pytest.mark.asyncio
async def test_resolve_for_ancestor_requester_aggregates_all_sources() -> None:
    ancestors = FakeAncestors({(3, 2)})
    accounts = FakeAccounts([owner_account(), referrer_account()])
    product_tokens = FakeProductTokens([pod(2), pod(3), mystery_pod(3)])
    purchases = FakePurchases(
        [PurchaseRecord(id=1, account_id=3, address=OWNER_WALLET, trx_at=NOW_UTC)]
    )
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        ancestors=ancestors,
        accounts=accounts,
        product_tokens=product_tokens,
        purchases=purchases,
    )

    result = await resolver.resolve(_request(current_user_id=2))

    assert result == MemberDetailResponse(
        hive_id=1,
        account_id=3,
        account_wallet_public_key="0x742d...f44e",
        username="user3",
        referrer_account_id=4,
        referrer_username="user4",
        beacon_points=20,
        tier=1,
        tier_name="New Bee",
        active_status=True,
        last_purchase_at=NOW_UTC,
        is_trial=False,
    )
    assert ancestors.calls == [{"account_id": 3, "ancestor_account_id": 2, "is_testing": True}]
    assert accounts.calls == [[3, 4]]
    assert product_tokens.calls == [
        {"owner_address": OWNER_WALLET, "product_slugs": ALLOWED_SLUGS, "is_testing": True}
    ]
    assert purchases.calls == [{"account_id": 3, "wallet_address": OWNER_WALLET}]


@pytest.mark.asyncio
async def test_resolve_for_owner_skips_ancestor_lookup() -> None:
    ancestors = FakeAncestors()
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        ancestors=ancestors,
        accounts=FakeAccounts([owner_account(), referrer_account()]),
        product_tokens=FakeProductTokens([pod(2), pod(3), mystery_pod(3)]),
    )

    result = await resolver.resolve(_request(current_user_id=3))

    assert ancestors.calls == []
    assert result.beacon_points == 20
    assert result.tier == 1
    assert result.tier_name == "New Bee"
    assert result.referrer_username == "user4"
    assert result.last_purchase_at is None
    assert result.is_trial is False


@pytest.mark.asyncio
async def test_resolve_trial_member_without_tokens_gets_trial_tier() -> None:
    accounts = FakeAccounts([owner_account(), referrer_account()])
    hive = _referred_hive(
        referrer_account_id=0,
        beacon_points=0,
        trial_ended_at=NOW_UTC + timedelta(days=14),
    )
    resolver = build_resolver(hives=FakeHives([hive]), accounts=accounts)

    result = await resolver.resolve(_request(current_user_id=3))

    assert result == MemberDetailResponse(
        hive_id=1,
        account_id=3,
        account_wallet_public_key="0x742d...f44e",
        username="user3",
        referrer_account_id=0,
        referrer_username="",
        beacon_points=0,
        tier=1,
        tier_name="New Bee",
        active_status=True,
        last_purchase_at=None,
        is_trial=True,
    )
    # Referrer id 0 is never looked up, even if the batch could return it.
    assert accounts.calls == [[3]]


@pytest.mark.asyncio
async def test_resolve_expired_trial_without_tokens_has_no_tier() -> None:
    hive = _referred_hive(referrer_account_id=0, trial_ended_at=NOW_UTC)
    resolver = build_resolver(hives=FakeHives([hive]), accounts=FakeAccounts([owner_account()]))

    result = await resolver.resolve(_request(current_user_id=3))

    assert result.is_trial is False
    assert result.tier == 0
    assert result.tier_name == ""


@pytest.mark.asyncio
async def test_resolve_ignores_stored_beacon_points() -> None:
    results = []
    for stored_points in (0, 10, 9_999):
        resolver = build_resolver(
            hives=FakeHives([_referred_hive(beacon_points=stored_points)]),
            accounts=FakeAccounts([owner_account(), referrer_account()]),
            product_tokens=FakeProductTokens([pod(1)]),
        )
        results.append(await resolver.resolve(_request(current_user_id=3)))

    assert {result.beacon_points for result in results} == {10}


@pytest.mark.asyncio
async def test_resolve_missing_hive_raises_not_found_without_other_calls() -> None:
    ancestors = FakeAncestors()
    accounts = FakeAccounts()
    product_tokens = FakeProductTokens()
    purchases = FakePurchases()
    resolver = build_resolver(
        hives=FakeHives([]),
        ancestors=ancestors,
        accounts=accounts,
        product_tokens=product_tokens,
        purchases=purchases,
    )

    with pytest.raises(HiveNotFoundError):
        await resolver.resolve(_request(current_user_id=2))

    assert ancestors.calls == []
    assert accounts.calls == []
    assert product_tokens.calls == []
    assert purchases.calls == []


@pytest.mark.asyncio
async def test_resolve_hive_from_other_data_scope_is_not_found() -> None:
    resolver = build_resolver(
        hives=FakeHives([_referred_hive(is_testing=False)]),
        accounts=FakeAccounts([owner_account()]),
    )

    with pytest.raises(HiveNotFoundError):
        await resolver.resolve(_request(current_user_id=3))


@pytest.mark.asyncio
async def test_resolve_ambiguous_hive_surfaces_integrity_error() -> None:
    resolver = build_resolver(hives=FakeHives(error=HiveIntegrityError("hive 1 matched 2 rows")))

    with pytest.raises(HiveNotFoundError) as exc_info:
        await resolver.resolve(_request(current_user_id=3))

    assert isinstance(exc_info.value, HiveIntegrityError)


@pytest.mark.asyncio
async def test_resolve_non_descendant_requester_is_denied_before_lookups() -> None:
    accounts = FakeAccounts([owner_account(), referrer_account()])
    product_tokens = FakeProductTokens([pod(1)])
    purchases = FakePurchases()
    resolver = build_resolver(
        hives=FakeHives([_referred_hive(beacon_points=100)]),
        ancestors=FakeAncestors(set()),
        accounts=accounts,
        product_tokens=product_tokens,
        purchases=purchases,
    )

    with pytest.raises(HiveAccessError):
        await resolver.resolve(_request(current_user_id=2))

    assert accounts.calls == []
    assert product_tokens.calls == []
    assert purchases.calls == []


@pytest.mark.asyncio
async def test_resolve_hive_lookup_failure_is_dependency_error() -> None:
    resolver = build_resolver(hives=FakeHives(error=RuntimeError("error in getting hive members")))

    with pytest.raises(HiveDependencyError) as exc_info:
        await resolver.resolve(_request(current_user_id=2))

    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_resolve_ancestor_lookup_failure_is_dependency_error() -> None:
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        ancestors=FakeAncestors(error=RuntimeError("error in getting flat hive")),
    )

    with pytest.raises(HiveDependencyError):
        await resolver.resolve(_request(current_user_id=2))


@pytest.mark.asyncio
async def test_resolve_owner_missing_from_account_batch_is_dependency_error() -> None:
    product_tokens = FakeProductTokens()
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        accounts=FakeAccounts([referrer_account()]),
        product_tokens=product_tokens,
    )

    with pytest.raises(HiveDependencyError):
        await resolver.resolve(_request(current_user_id=3))

    assert product_tokens.calls == []


@pytest.mark.asyncio
async def test_resolve_missing_referrer_account_leaves_username_empty() -> None:
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        accounts=FakeAccounts([owner_account()]),
    )

    result = await resolver.resolve(_request(current_user_id=3))

    assert result.referrer_account_id == 4
    assert result.referrer_username == ""


@pytest.mark.asyncio
async def test_resolve_token_service_failure_is_dependency_error() -> None:
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        accounts=FakeAccounts([owner_account(), referrer_account()]),
        product_tokens=FakeProductTokens(error=UpstreamServiceError("product_tokens", "HTTP 500")),
    )

    with pytest.raises(HiveDependencyError) as exc_info:
        await resolver.resolve(_request(current_user_id=3))

    assert isinstance(exc_info.value.__cause__, UpstreamServiceError)


@pytest.mark.asyncio
async def test_resolve_purchase_lookup_failure_fails_whole_call() -> None:
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        accounts=FakeAccounts([owner_account(), referrer_account()]),
        product_tokens=FakeProductTokens([pod(1)]),
        purchases=FakePurchases(error=RuntimeError("transactions unavailable")),
    )

    with pytest.raises(HiveDependencyError):
        await resolver.resolve(_request(current_user_id=3))


@pytest.mark.asyncio
async def test_resolve_malformed_rule_fails_with_configuration_error() -> None:
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        accounts=FakeAccounts([owner_account(), referrer_account()]),
        product_tokens=FakeProductTokens([pod(1)]),
        rules={"bythen-pod": "ten"},
    )

    with pytest.raises(HiveConfigurationError):
        await resolver.resolve(_request(current_user_id=3))


@pytest.mark.asyncio
async def test_resolve_malformed_rule_for_unowned_slug_fails_with_configuration_error() -> None:
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        accounts=FakeAccounts([owner_account(), referrer_account()]),
        product_tokens=FakeProductTokens([pod(1)]),
        rules={"bythen-pod": "10", "bythen-card": "n/a"},
    )

    with pytest.raises(HiveConfigurationError, match="bythen-card"):
        await resolver.resolve(_request(current_user_id=3))


@pytest.mark.asyncio
async def test_resolve_cancels_pending_purchase_lookup_when_scoring_fails() -> None:
    purchase_cancelled = asyncio.Event()

    class _SlowPurchases:
        async def latest_purchase(self, *, account_id: int, wallet_address: str):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                purchase_cancelled.set()
                raise

    class _FailingTokens:
        async def get_owned_tokens(self, **_kwargs: object):
            await asyncio.sleep(0.01)
            raise RuntimeError("web3svc down")

    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        accounts=FakeAccounts([owner_account(), referrer_account()]),
        product_tokens=_FailingTokens(),  # type: ignore[arg-type]
        purchases=_SlowPurchases(),  # type: ignore[arg-type]
    )

    with pytest.raises(HiveDependencyError):
        await resolver.resolve(_request(current_user_id=3))

    assert purchase_cancelled.is_set()


@pytest.mark.asyncio
async def test_resolve_caller_cancellation_propagates() -> None:
    class _HangingTokens:
        async def get_owned_tokens(self, **_kwargs: object):
            await asyncio.sleep(10)

    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        accounts=FakeAccounts([owner_account(), referrer_account()]),
        product_tokens=_HangingTokens(),  # type: ignore[arg-type]
    )

    task = asyncio.create_task(resolver.resolve(_request(current_user_id=3)))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_resolve_is_idempotent_for_unchanged_data() -> None:
    resolver = build_resolver(
        hives=FakeHives([_referred_hive()]),
        ancestors=FakeAncestors({(3, 2)}),
        accounts=FakeAccounts([owner_account(), referrer_account()]),
        product_tokens=FakeProductTokens([pod(2), pod(3)]),
        purchases=FakePurchases(
            [PurchaseRecord(id=1, account_id=3, address=OWNER_WALLET, trx_at=NOW_UTC)]
        ),
    )

    first = await resolver.resolve(_request(current_user_id=2))
    second = await resolver.resolve(_request(current_user_id=2))

    assert first == second


@pytest.mark.asyncio
async def test_resolve_zero_referrer_ignores_unrequested_accounts_in_batch() -> None:
    class _OversharingAccounts:
        async def get_accounts(self, account_ids):
            return [owner_account(), Account(id=0, wallet_public_key="", username="ghost")]

    resolver = build_resolver(
        hives=FakeHives([_referred_hive(referrer_account_id=0)]),
        accounts=_OversharingAccounts(),  # type: ignore[arg-type]
    )

    result = await resolver.resolve(_request(current_user_id=3))

    assert result.referrer_account_id == 0
    assert result.referrer_username == ""


class _RecordingLogger:
    def __init__(self, events: list[tuple[str, dict[str, object]]], **bound: object) -> None:
        self._events = events
        self._bound = bound

    def bind(self, **fields: object) -> _RecordingLogger:
        return _RecordingLogger(self._events, **self._bound, **fields)

    def _record(self, event: str, **fields: object) -> None:
        self._events.append((event, {**self._bound, **fields}))

    info = warning = error = _record


@pytest.mark.asyncio
async def test_resolve_denial_logs_access_and_failure_events(monkeypatch) -> None:
    from app.hive import access, detail

    events: list[tuple[str, dict[str, object]]] = []
    monkeypatch.setattr(access, "logger", _RecordingLogger(events))
    monkeypatch.setattr(detail, "logger", _RecordingLogger(events))
    resolver = build_resolver(hives=FakeHives([_referred_hive()]), ancestors=FakeAncestors(set()))

    with pytest.raises(HiveAccessError):
        await resolver.resolve(_request(current_user_id=2))

    assert [name for name, _ in events] == [
        "hive_member_access_denied",
        "hive_member_detail_failed",
    ]
    assert events[1][1]["error_code"] == HiveAccessError.code
    assert events[1][1]["requester_id"] == 2
