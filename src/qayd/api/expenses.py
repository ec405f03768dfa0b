"""Expense endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, clean_params, to_payload
from qayd.exports import ExportedFile, ExportFormat, export_filename
from qayd.models import CreateExpenseDto


class ExpensesAPI(Resource):
    path = "/expenses"

    async def list(
        self,
        category: str | None = None,
        status: str | None = None,
        employee_id: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
        min_amount: float | None = None,
        max_amount: float | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._list(
            self.path,
            params={
                "category": category,
                "status": status,
                "employee_id": employee_id,
                "start_date": start_date,
                "end_date": end_date,
                "min_amount": min_amount,
                "max_amount": max_amount,
                "search": search,
            },
        )

    async def get(self, expense_id: str) -> dict[str, Any]:
        return await self._get(self._url(expense_id))

    async def create(self, data: CreateExpenseDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, expense_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._put(self._url(expense_id), json=to_payload(data))

    async def delete(self, expense_id: str) -> None:
        await self._delete(self._url(expense_id))

    async def approve(self, expense_id: str) -> dict[str, Any]:
        return await self._post(self._url(expense_id, "approve"), json={})

    async def reject(self, expense_id: str, reason: str) -> dict[str, Any]:
        return await self._post(self._url(expense_id, "reject"), json={"reason": reason})

    async def upload_receipt(
        self,
        expense_id: str,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        return await self.client.upload(
            self._url(expense_id, "receipt"), "receipt", filename, content, content_type
        )

    async def summary(self, **filters: Any) -> dict[str, Any]:
        """Totals by status and category."""
        return await self._get(self._url("summary"), params=filters)

    async def export_excel(self, **filters: Any) -> ExportedFile:
        return await self.client.download(
            self._url("export", "excel"),
            params=clean_params(filters),
            filename=export_filename("expenses", ExportFormat.EXCEL),
        )
