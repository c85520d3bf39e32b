from __future__ import annotations

import structlog

from app.hive.errors import HiveAccessError, HiveDependencyError, HiveError
from app.hive.ports import AncestorLookup
from app.hive.types import HiveRecord

logger = structlog.get_logger(__name__)


async def ensure_can_view(
    hive: HiveRecord,
    *,
    requester_id: int,
    is_testing: bool,
    ancestors: AncestorLookup,
) -> None:
    """Allow the member themself or any of their referral-chain ancestors."""
    if requester_id == hive.account_id:
        return

    try:
        is_ancestor = await ancestors.has_ancestor(
            account_id=hive.account_id,
            ancestor_account_id=requester_id,
            is_testing=is_testing,
        )
    except HiveError:
        raise
    except Exception as exc:
        raise HiveDependencyError("ancestor lookup failed") from exc

    if not is_ancestor:
        logger.info(
            "hive_member_access_denied",
            hive_id=hive.id,
            requester_id=requester_id,
            is_testing=is_testing,
        )
        raise HiveAccessError(
            f"account {requester_id} is not allowed to view hive {hive.id}"
        )
