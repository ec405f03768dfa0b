"""Payment (receipt and disbursement) endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile, ExportFormat
from qayd.models import CreatePaymentDto


class PaymentsAPI(Resource):
    path = "/payments"

    async def list(
        self,
        payment_type: str | None = None,
        status: str | None = None,
        party_type: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._list(
            self.path,
            params={
                "payment_type": payment_type,
                "status": status,
                "party_type": party_type,
                "start_date": start_date,
                "end_date": end_date,
            },
        )

    async def get(self, payment_id: str) -> dict[str, Any]:
        return await self._get(self._url(payment_id))

    async def create(self, data: CreatePaymentDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, payment_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(self._url(payment_id), json=to_payload(data))

    async def delete(self, payment_id: str) -> None:
        await self._delete(self._url(payment_id))

    async def submit(self, payment_id: str) -> dict[str, Any]:
        return await self._post(self._url(payment_id, "submit"))

    async def approve(self, payment_id: str) -> dict[str, Any]:
        return await self._post(self._url(payment_id, "approve"))

    async def post(self, payment_id: str) -> dict[str, Any]:
        return await self._post(self._url(payment_id, "post"))

    async def cancel(self, payment_id: str, reason: str) -> dict[str, Any]:
        """Cancel a posted payment; the server reverses its journal."""
        return await self._post(self._url(payment_id, "cancel"), json={"reason": reason})

    async def export(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.client.exports.payments(fmt, **options)
