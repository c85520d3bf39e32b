from __future__ import annotations

from collections.abc import Sequence

import httpx

from app.clients._http import request_json
from app.clients.errors import UpstreamServiceError
from app.hive.types import ProductToken

SERVICE_NAME = "product_tokens"


class ProductTokensClient:
    """Reads product-token ownership from the web3 service."""

    def __init__(self, client: httpx.AsyncClient, *, base_url: str, token: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._token = token

    async def get_owned_tokens(
        self,
        *,
        owner_address: str,
        product_slugs: Sequence[str],
        is_testing: bool,
    ) -> list[ProductToken]:
        params: list[tuple[str, str]] = [
            ("owner_address", owner_address),
            ("is_testing", "true" if is_testing else "false"),
        ]
        params.extend(("products", slug) for slug in product_slugs)

        payload = await request_json(
            self._client,
            "GET",
            f"{self._base_url}/internal/product-tokens",
            service=SERVICE_NAME,
            token=self._token,
            params=params,
        )
        rows = payload.get("product_tokens")
        if not isinstance(rows, list):
            raise UpstreamServiceError(SERVICE_NAME, "missing 'product_tokens' list")

        try:
            return [
                ProductToken(
                    token_id=int(row["token_id"]),
                    product_id=int(row["product"]["id"]),
                    product_slug=str(row["product"]["slug"]),
                )
                for row in rows
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamServiceError(SERVICE_NAME, "malformed product token row") from exc
