"""Fiscal year and accounting period endpoints."""

from __future__ import annotations

from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.models import CreateFiscalYearDto


class FiscalYearsAPI(Resource):
    path = "/settings/fiscal-years"

    async def list(
        self, is_locked: bool | None = None, search: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._list(self.path, params={"is_locked": is_locked, "search": search})

    async def get(self, fiscal_year_id: str) -> dict[str, Any]:
        """A fiscal year with its accounting periods."""
        return await self._get(self._url(fiscal_year_id))

    async def create(self, data: CreateFiscalYearDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, fiscal_year_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(self._url(fiscal_year_id), json=to_payload(data))

    async def delete(self, fiscal_year_id: str) -> None:
        await self._delete(self._url(fiscal_year_id))

    async def lock(self, fiscal_year_id: str) -> dict[str, Any]:
        """Close the year to further postings."""
        return await self._post(self._url(fiscal_year_id, "lock"))

    async def unlock(self, fiscal_year_id: str) -> dict[str, Any]:
        return await self._post(self._url(fiscal_year_id, "unlock"))

    async def set_current(self, fiscal_year_id: str) -> dict[str, Any]:
        return await self._post(self._url(fiscal_year_id, "set-current"))
