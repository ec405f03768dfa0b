"""Bank account and transaction endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload


class BankingAPI(Resource):
    path = "/banking"

    async def list_accounts(
        self, is_active: bool | None = None, search: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._list(
            self._url("accounts"), params={"is_active": is_active, "search": search}
        )

    async def get_account(self, account_id: str) -> dict[str, Any]:
        return await self._get(self._url("accounts", account_id))

    async def create_account(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post(self._url("accounts"), json=to_payload(data))

    async def update_account(self, account_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(self._url("accounts", account_id), json=to_payload(data))

    async def delete_account(self, account_id: str) -> None:
        await self._delete(self._url("accounts", account_id))

    async def list_transactions(
        self,
        account_id: str,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
        type: str | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._list(
            self._url("accounts", account_id, "transactions"),
            params={
                "start_date": start_date,
                "end_date": end_date,
                "type": type,
                "search": search,
            },
        )

    async def summary(self) -> dict[str, Any]:
        """Balances across all bank accounts."""
        return await self._get(self._url("summary"))
