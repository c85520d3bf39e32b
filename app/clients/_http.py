from __future__ import annotations

from typing import Any

import httpx
import structlog

from app.clients.errors import UpstreamServiceError
from app.services.internal_auth import INTERNAL_TOKEN_HEADER

logger = structlog.get_logger("app.clients")


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    service: str,
    token: str,
    **kwargs: Any,
) -> dict[str, Any]:
    headers = {INTERNAL_TOKEN_HEADER: token}
    try:
        response = await client.request(method, url, headers=headers, **kwargs)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "upstream_request_rejected",
            provider=service,
            status_code=exc.response.status_code,
        )
        raise UpstreamServiceError(service, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        logger.warning("upstream_request_failed", provider=service, error=type(exc).__name__)
        raise UpstreamServiceError(service, "request failed") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamServiceError(service, "response is not JSON") from exc
    if not isinstance(payload, dict):
        raise UpstreamServiceError(service, "response is not a JSON object")
    return payload
