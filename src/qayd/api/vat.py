"""VAT rate and VAT return endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.api.reports import report_format
from qayd.exports import ExportedFile, ExportFormat
from qayd.models import CreateVatRateDto, VatReturnStatus, iso_date


class VatRatesAPI(Resource):
    path = "/tax/vat/rates"

    async def list(self, include_inactive: bool = False) -> list[dict[str, Any]]:
        return await self._list(self.path, params={"includeInactive": include_inactive})

    async def get(self, rate_id: str) -> dict[str, Any]:
        return await self._get(self._url(rate_id))

    async def create(self, data: CreateVatRateDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, rate_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._put(self._url(rate_id), json=to_payload(data))

    async def deactivate(self, rate_id: str) -> None:
        await self._delete(self._url(rate_id))


class VatReturnsAPI(Resource):
    """The return cycle: calculate, review the breakdown, file, then pay."""

    path = "/tax/vat/returns"

    async def list(
        self, year: int | None = None, status: VatReturnStatus | str | None = None
    ) -> list[dict[str, Any]]:
        return await self._list(self.path, params={"year": year, "status": status})

    async def get(self, return_id: str) -> dict[str, Any]:
        return await self._get(self._url(return_id))

    async def calculate(self, period_start: date | str, period_end: date | str) -> dict[str, Any]:
        """Compute output and input VAT for a period as a new return."""
        return await self._post(
            self._url("calculate"),
            json={"period_start": iso_date(period_start), "period_end": iso_date(period_end)},
        )

    async def breakdown(self, return_id: str) -> dict[str, Any]:
        """Sales and purchase totals behind a return, grouped by rate."""
        return await self._get(self._url(return_id, "breakdown"))

    async def file(self, return_id: str, filing_date: date | str | None = None) -> dict[str, Any]:
        return await self._post(
            self._url(return_id, "file"),
            json={"filing_date": iso_date(filing_date or date.today())},
        )

    async def record_payment(
        self,
        return_id: str,
        payment_date: date | str | None = None,
        reference: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"payment_date": iso_date(payment_date or date.today())}
        if reference:
            payload["payment_reference"] = reference
        return await self._post(self._url(return_id, "payment"), json=payload)

    async def delete(self, return_id: str) -> None:
        await self._delete(self._url(return_id))

    async def export(self, return_id: str, fmt: ExportFormat | str) -> ExportedFile:
        export_format = report_format(fmt)
        return await self.client.download(self._url(return_id, "export", export_format.value))

    async def export_pdf(self, return_id: str) -> ExportedFile:
        return await self.export(return_id, ExportFormat.PDF)

    async def export_excel(self, return_id: str) -> ExportedFile:
        return await self.export(return_id, ExportFormat.EXCEL)
