"""Quotation endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile
from qayd.models import CreateQuotationDto


class QuotationsAPI(Resource):
    path = "/quotations"

    async def list(
        self,
        status: str | None = None,
        customer_id: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
        search: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """List quotations; the server answers with a paged envelope."""
        return await self._list(
            self.path,
            params={
                "status": status,
                "customer_id": customer_id,
                "start_date": start_date,
                "end_date": end_date,
                "search": search,
                "page": page,
                "limit": limit,
            },
        )

    async def get(self, quotation_id: str) -> dict[str, Any]:
        return await self._get(self._url(quotation_id))

    async def create(self, data: CreateQuotationDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, quotation_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._put(self._url(quotation_id), json=to_payload(data))

    async def delete(self, quotation_id: str) -> None:
        await self._delete(self._url(quotation_id))

    async def send(self, quotation_id: str) -> dict[str, Any]:
        return await self._post(self._url(quotation_id, "send"))

    async def accept(self, quotation_id: str) -> dict[str, Any]:
        return await self._post(self._url(quotation_id, "accept"))

    async def reject(self, quotation_id: str) -> dict[str, Any]:
        return await self._post(self._url(quotation_id, "reject"))

    async def convert_to_invoice(self, quotation_id: str) -> dict[str, Any]:
        """Create an invoice from an accepted quotation.

        Returns:
            Mapping with `invoiceId` and `quotationNumber`.
        """
        return await self._post(self._url(quotation_id, "convert-to-invoice"), json={})

    async def export_pdf(self, quotation_id: str) -> ExportedFile:
        return await self.client.download(self._url(quotation_id, "export", "pdf"))
