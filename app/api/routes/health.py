from __future__ import annotations

import asyncio
from typing import Any

import httpx
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.core.config import get_settings
from app.db.session import SessionLocal

router = APIRouter(tags=["health"])


def _ok_check(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"status": "ok"}
    if extra:
        payload.update(extra)
    return payload


def _failed_check(error: str) -> dict[str, str]:
    return {"status": "failed", "error": error}


async def _check_database() -> dict[str, Any]:
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return _ok_check()
    except Exception as exc:
        return _failed_check(str(exc))


async def _check_upstream(client: httpx.AsyncClient, base_url: str) -> dict[str, Any]:
    try:
        response = await client.get(f"{base_url.rstrip('/')}/health")
        response.raise_for_status()
        return _ok_check({"status_code": response.status_code})
    except Exception as exc:
        return _failed_check(str(exc))


async def _collect_checks() -> dict[str, dict[str, Any]]:
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.upstream_http_timeout_seconds) as client:
        checks = await asyncio.gather(
            _check_database(),
            _check_upstream(client, settings.accounts_api_url),
            _check_upstream(client, settings.product_tokens_api_url),
        )
    return {
        "database": checks[0],
        "accounts": checks[1],
        "product_tokens": checks[2],
    }


def _all_checks_ok(checks: dict[str, dict[str, Any]]) -> bool:
    return all(check.get("status") == "ok" for check in checks.values())


@router.get("/health")
async def health() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_200_OK, content={"status": "ok"})


@router.get("/ready")
async def ready() -> JSONResponse:
    checks = await _collect_checks()
    is_ready = _all_checks_ok(checks)
    return JSONResponse(
        status_code=status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if is_ready else "not_ready",
            "checks": checks,
        },
    )
