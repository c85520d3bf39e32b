from __future__ import annotations

import pytest

from app.hive.access import ensure_can_view
from app.hive.errors import HiveAccessError, HiveDependencyError
from app.hive.types import HiveRecord
from tests.hive.hive_fixtures import FakeAncestors

HIVE = HiveRecord(id=1, account_id=3, referrer_account_id=4, beacon_points=0, active_status=True)


@pytest.mark.asyncio
async def test_owner_is_allowed_without_ancestor_lookup() -> None:
    ancestors = FakeAncestors(error=RuntimeError("must not be called"))

    await ensure_can_view(HIVE, requester_id=3, is_testing=False, ancestors=ancestors)

    assert ancestors.calls == []


@pytest.mark.asyncio
async def test_registered_ancestor_is_allowed() -> None:
    ancestors = FakeAncestors({(3, 9)})

    await ensure_can_view(HIVE, requester_id=9, is_testing=True, ancestors=ancestors)

    assert ancestors.calls == [{"account_id": 3, "ancestor_account_id": 9, "is_testing": True}]


@pytest.mark.asyncio
async def test_descendant_cannot_view_ancestor() -> None:
    # Edge (9 -> 3) means 3 is an ancestor of 9, not the other way round.
    ancestors = FakeAncestors({(9, 3)})

    with pytest.raises(HiveAccessError):
        await ensure_can_view(HIVE, requester_id=9, is_testing=False, ancestors=ancestors)


@pytest.mark.asyncio
async def test_lookup_error_becomes_dependency_error() -> None:
    ancestors = FakeAncestors(error=ConnectionError("db gone"))

    with pytest.raises(HiveDependencyError) as exc_info:
        await ensure_can_view(HIVE, requester_id=2, is_testing=False, ancestors=ancestors)

    assert isinstance(exc_info.value.__cause__, ConnectionError)
