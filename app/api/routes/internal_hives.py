from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import httpx
import structlog
from fastapi import APIRouter, Header, HTTPException, Query, Request
from pydantic import BaseModel, Field

from app.core.config import get_settings
from app.db.session import SessionLocal
from app.hive.detail import HiveMemberDetailResolver
from app.hive.errors import (
    HiveAccessError,
    HiveConfigurationError,
    HiveDependencyError,
    HiveNotFoundError,
)
from app.hive.types import MemberDetailRequest, MemberDetailResponse
from app.hive.wiring import build_member_detail_resolver
from app.services.internal_auth import assert_internal_access

router = APIRouter(tags=["internal", "hives"])
logger = structlog.get_logger(__name__)


class HiveMemberDetailResponse(BaseModel):
    hive_id: int = Field(gt=0)
    account_id: int = Field(gt=0)
    account_wallet_public_key: str
    username: str
    referrer_account_id: int = Field(ge=0)
    referrer_username: str
    beacon_points: int
    tier: int = Field(ge=0)
    tier_name: str
    active_status: bool
    last_purchase_at: datetime | None = None
    is_trial: bool


def _parse_account_id(raw_value: str | None) -> int:
    if raw_value is None:
        raise HTTPException(status_code=422, detail={"code": "E_ACCOUNT_ID_INVALID"})
    try:
        account_id = int(raw_value.strip())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_ACCOUNT_ID_INVALID"}) from exc
    if account_id <= 0:
        raise HTTPException(status_code=422, detail={"code": "E_ACCOUNT_ID_INVALID"})
    return account_id


@asynccontextmanager
async def _member_detail_resolver(settings: Any) -> AsyncIterator[HiveMemberDetailResolver]:
    async with (
        SessionLocal.begin() as session,
        httpx.AsyncClient(timeout=settings.upstream_http_timeout_seconds) as http_client,
    ):
        yield build_member_detail_resolver(session, http_client=http_client, settings=settings)


def _as_response(detail: MemberDetailResponse) -> HiveMemberDetailResponse:
    return HiveMemberDetailResponse(
        hive_id=detail.hive_id,
        account_id=detail.account_id,
        account_wallet_public_key=detail.account_wallet_public_key,
        username=detail.username,
        referrer_account_id=detail.referrer_account_id,
        referrer_username=detail.referrer_username,
        beacon_points=detail.beacon_points,
        tier=detail.tier,
        tier_name=detail.tier_name,
        active_status=detail.active_status,
        last_purchase_at=detail.last_purchase_at,
        is_trial=detail.is_trial,
    )


@router.get("/internal/hives/{hive_id}/detail", response_model=HiveMemberDetailResponse)
async def get_hive_member_detail(
    request: Request,
    hive_id: int,
    is_testing: bool = Query(default=False),
    x_account_id: str | None = Header(default=None, alias="X-Account-Id"),
) -> HiveMemberDetailResponse:
    settings = get_settings()
    assert_internal_access(request, settings=settings, scope="hives")
    if hive_id <= 0:
        raise HTTPException(status_code=404, detail={"code": "E_HIVE_NOT_FOUND"})
    current_user_id = _parse_account_id(x_account_id)

    detail_request = MemberDetailRequest(
        hive_id=hive_id,
        current_user_id=current_user_id,
        is_testing=is_testing,
    )
    try:
        async with asyncio.timeout(settings.hive_detail_timeout_seconds):
            async with _member_detail_resolver(settings) as resolver:
                detail = await resolver.resolve(detail_request)
    except HiveNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_HIVE_NOT_FOUND"}) from exc
    except HiveAccessError as exc:
        raise HTTPException(status_code=403, detail={"code": "E_HIVE_ACCESS_DENIED"}) from exc
    except HiveDependencyError as exc:
        raise HTTPException(status_code=502, detail={"code": "E_HIVE_DEPENDENCY_FAILED"}) from exc
    except HiveConfigurationError as exc:
        logger.error("hive_rule_configuration_invalid", hive_id=hive_id, reason=str(exc))
        raise HTTPException(
            status_code=500,
            detail={"code": "E_HIVE_CONFIGURATION_INVALID"},
        ) from exc
    except TimeoutError as exc:
        logger.warning("hive_member_detail_timeout", hive_id=hive_id, requester_id=current_user_id)
        raise HTTPException(status_code=504, detail={"code": "E_HIVE_DETAIL_TIMEOUT"}) from exc

    return _as_response(detail)
