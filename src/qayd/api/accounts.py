"""Chart of accounts endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile, ExportFormat


class AccountsAPI(Resource):
    path = "/coa"

    async def list(self, include_inactive: bool | None = None) -> list[dict[str, Any]]:
        return await self._list(self.path, params={"includeInactive": include_inactive})

    async def by_type(self, account_type: str) -> list[dict[str, Any]]:
        return await self._list(self._url("by-type", account_type))

    async def get(self, account_id: str) -> dict[str, Any]:
        return await self._get(self._url(account_id))

    async def get_by_code(self, code: str) -> dict[str, Any]:
        return await self._get(self._url("code", code))

    async def balance(self, account_id: str, as_of: date | str | None = None) -> dict[str, Any]:
        return await self._get(self._url(account_id, "balance"), params={"as_of": as_of})

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, account_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(self._url(account_id), json=to_payload(data))

    async def delete(self, account_id: str) -> None:
        await self._delete(self._url(account_id))

    async def export(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.client.exports.chart_of_accounts(fmt, **options)
