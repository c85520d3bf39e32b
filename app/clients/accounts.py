from __future__ import annotations

from collections.abc import Collection

import httpx

from app.clients._http import request_json
from app.clients.errors import UpstreamServiceError
from app.hive.types import Account

SERVICE_NAME = "accounts"


class AccountsClient:
    """Batch account lookups against the auth service."""

    def __init__(self, client: httpx.AsyncClient, *, base_url: str, token: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._token = token

    async def get_accounts(self, account_ids: Collection[int]) -> list[Account]:
        ids = [int(account_id) for account_id in account_ids]
        if not ids:
            return []

        payload = await request_json(
            self._client,
            "POST",
            f"{self._base_url}/internal/accounts/batch",
            service=SERVICE_NAME,
            token=self._token,
            json={"ids": ids},
        )
        rows = payload.get("accounts")
        if not isinstance(rows, list):
            raise UpstreamServiceError(SERVICE_NAME, "missing 'accounts' list")

        try:
            return [
                Account(
                    id=int(row["id"]),
                    wallet_public_key=str(row.get("wallet_public_key") or ""),
                    username=str(row.get("username") or ""),
                )
                for row in rows
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise UpstreamServiceError(SERVICE_NAME, "malformed account row") from exc
