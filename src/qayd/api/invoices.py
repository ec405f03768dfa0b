"""Invoice endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile, ExportFormat
from qayd.models import CreateInvoiceDto


class InvoicesAPI(Resource):
    path = "/invoices"

    async def list(
        self,
        invoice_type: str | None = None,
        status: str | None = None,
        party_type: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._list(
            self.path,
            params={
                "invoice_type": invoice_type,
                "status": status,
                "party_type": party_type,
                "start_date": start_date,
                "end_date": end_date,
            },
        )

    async def get(self, invoice_id: str) -> dict[str, Any]:
        return await self._get(self._url(invoice_id))

    async def create(self, data: CreateInvoiceDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, invoice_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(self._url(invoice_id), json=to_payload(data))

    async def delete(self, invoice_id: str) -> None:
        await self._delete(self._url(invoice_id))

    async def submit(self, invoice_id: str) -> dict[str, Any]:
        return await self._post(self._url(invoice_id, "submit"))

    async def approve(self, invoice_id: str) -> dict[str, Any]:
        return await self._post(self._url(invoice_id, "approve"))

    async def post(self, invoice_id: str) -> dict[str, Any]:
        return await self._post(self._url(invoice_id, "post"))

    async def export_pdf(self, invoice_id: str) -> ExportedFile:
        return await self.client.download(self._url(invoice_id, "export", "pdf"))

    async def export(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.client.exports.invoices(fmt, **options)
