"""Fixed asset and depreciation endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from qayd.api.base import Resource, to_payload
from qayd.models import iso_date

DisposalType = Literal["dispose", "sell"]


class AssetsAPI(Resource):
    path = "/assets"

    async def list(
        self,
        category: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._list(
            self.path, params={"category": category, "status": status, "search": search}
        )

    async def get(self, asset_id: str) -> dict[str, Any]:
        return await self._get(self._url(asset_id))

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, asset_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._put(self._url(asset_id), json=to_payload(data))

    async def dispose(
        self,
        asset_id: str,
        disposal_date: date | str,
        disposal_amount: float = 0.0,
        disposal_type: DisposalType = "dispose",
    ) -> dict[str, Any]:
        """Retire an asset by scrapping (`dispose`) or selling it (`sell`)."""
        if disposal_type not in ("dispose", "sell"):
            raise ValueError(f"Unknown disposal type: {disposal_type}")
        return await self._post(
            self._url(asset_id, disposal_type),
            json={
                "disposal_date": iso_date(disposal_date),
                "disposal_amount": disposal_amount,
            },
        )

    async def sell(
        self, asset_id: str, disposal_date: date | str, disposal_amount: float
    ) -> dict[str, Any]:
        return await self.dispose(asset_id, disposal_date, disposal_amount, "sell")

    def _period(self, period_start: date | str, period_end: date | str) -> dict[str, Any]:
        return {"period_start": iso_date(period_start), "period_end": iso_date(period_end)}

    async def calculate_depreciation(
        self, period_start: date | str, period_end: date | str
    ) -> dict[str, Any]:
        return await self._post(
            self._url("depreciation", "calculate"), json=self._period(period_start, period_end)
        )

    async def preview_depreciation(
        self, period_start: date | str, period_end: date | str
    ) -> dict[str, Any]:
        return await self._post(
            self._url("depreciation", "preview"), json=self._period(period_start, period_end)
        )

    async def post_depreciation(
        self, period_start: date | str, period_end: date | str
    ) -> dict[str, Any]:
        """Post calculated depreciation for the period to the ledger."""
        return await self._post(
            self._url("depreciation", "post"), json=self._period(period_start, period_end)
        )

    async def depreciation_history(self, **filters: Any) -> list[dict[str, Any]]:
        return await self._list(self._url("depreciation", "history"), params=filters)

    async def summary(self) -> dict[str, Any]:
        return await self._get(self._url("summary"))
