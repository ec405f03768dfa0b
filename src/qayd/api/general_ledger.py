"""General ledger listing and export."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from qayd.api.base import Resource
from qayd.api.reports import report_format
from qayd.calculations import safe_parse_float
from qayd.exports import ExportedFile, ExportFormat, export_filename

# Account types whose balance grows with debits
DEBIT_NORMAL_TYPES = frozenset({"asset", "expense"})


def with_running_balance(entries: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Copy ledger lines adding `running_balance` in each line's normal direction.

    Lines without an account id fall back to the account code and lines
    without a reference number fall back to the free-text reference.
    """
    balance = 0.0
    result = []
    for entry in entries:
        debit = safe_parse_float(entry.get("debit"))
        credit = safe_parse_float(entry.get("credit"))
        if entry.get("account_type") in DEBIT_NORMAL_TYPES:
            balance += debit - credit
        else:
            balance += credit - debit
        result.append(
            {
                **entry,
                "balance": balance,
                "running_balance": balance,
                "account_id": entry.get("account_id") or entry.get("account_code"),
                "reference_number": entry.get("reference_number") or entry.get("reference"),
            }
        )
    return result


class GeneralLedgerAPI(Resource):
    path = "/reports/general-ledger"

    @staticmethod
    def _filters(
        account_id: str | None, start_date: date | str | None, end_date: date | str | None
    ) -> dict[str, Any]:
        return {"accountId": account_id, "startDate": start_date, "endDate": end_date}

    async def entries(
        self,
        account_id: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Posted ledger lines in date order, each with its running balance."""
        params = {**self._filters(account_id, start_date, end_date), "page": page, "limit": limit}
        return with_running_balance(await self._list(self.path, params=params))

    async def export(
        self,
        fmt: ExportFormat | str,
        account_id: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> ExportedFile:
        export_format = report_format(fmt)
        return await self.client.download(
            self._url("export", export_format.value),
            params=self._filters(account_id, start_date, end_date),
            filename=export_filename("general_ledger", export_format),
        )
