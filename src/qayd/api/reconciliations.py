"""Bank reconciliation endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile
from qayd.models import CreateReconciliationDto, iso_date


class ReconciliationsAPI(Resource):
    path = "/banking/reconciliations"

    async def list(
        self, status: str | None = None, account_id: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._list(self.path, params={"status": status, "account_id": account_id})

    async def get(self, reconciliation_id: str) -> dict[str, Any]:
        return await self._get(self._url(reconciliation_id))

    async def create(self, data: CreateReconciliationDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def start(
        self, account_id: str, statement_date: date | str, statement_balance: float
    ) -> dict[str, Any]:
        """Start a reconciliation for a bank account from a statement."""
        return await self._post(
            f"/banking/accounts/{account_id}/reconciliations",
            json={
                "statement_date": iso_date(statement_date),
                "statement_balance": statement_balance,
            },
        )

    async def unmatched(self, reconciliation_id: str) -> dict[str, Any]:
        """Bank and book transactions not yet matched."""
        return await self._get(self._url(reconciliation_id, "unmatched"))

    async def match(
        self,
        reconciliation_id: str,
        bank_transaction_id: str,
        book_transaction_id: str,
    ) -> dict[str, Any]:
        return await self._post(
            self._url(reconciliation_id, "match"),
            json={
                "bank_transaction_id": bank_transaction_id,
                "book_transaction_id": book_transaction_id,
            },
        )

    async def unmatch(self, reconciliation_id: str, match_id: str) -> None:
        await self._delete(self._url(reconciliation_id, "matches", match_id))

    async def complete(self, reconciliation_id: str) -> dict[str, Any]:
        return await self._post(self._url(reconciliation_id, "complete"))

    async def delete(self, reconciliation_id: str) -> None:
        await self._delete(self._url(reconciliation_id))

    async def export_pdf(self, reconciliation_id: str) -> ExportedFile:
        return await self.client.download(self._url(reconciliation_id, "export", "pdf"))

    async def export_excel(self, reconciliation_id: str) -> ExportedFile:
        return await self.client.download(self._url(reconciliation_id, "export", "excel"))
