"""Purchase order endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile
from qayd.models import CreatePurchaseOrderDto


class PurchaseOrdersAPI(Resource):
    path = "/purchases/purchase-orders"

    async def list(
        self,
        status: str | None = None,
        vendor_id: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
        search: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        return await self._list(
            self.path,
            params={
                "status": status,
                "vendor_id": vendor_id,
                "start_date": start_date,
                "end_date": end_date,
                "search": search,
                "page": page,
                "limit": limit,
            },
        )

    async def get(self, order_id: str) -> dict[str, Any]:
        return await self._get(self._url(order_id))

    async def create(self, data: CreatePurchaseOrderDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, order_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(self._url(order_id), json=to_payload(data))

    async def delete(self, order_id: str) -> None:
        await self._delete(self._url(order_id))

    async def convert_to_bill(self, order_id: str) -> dict[str, Any]:
        """Create a purchase invoice from a received order."""
        return await self._post(self._url(order_id, "convert-to-bill"), json={})

    async def export_pdf(self, order_id: str) -> ExportedFile:
        return await self.client.download(self._url(order_id, "export", "pdf"))
