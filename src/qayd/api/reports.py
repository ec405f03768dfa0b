"""Trial balance and financial statement endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from qayd.api.base import Resource
from qayd.exports import ExportedFile, ExportFormat, export_filename

StatementType = Literal["balance-sheet", "income-statement", "cash-flow"]
STATEMENT_TYPES = ("balance-sheet", "income-statement", "cash-flow")


def report_format(fmt: ExportFormat | str) -> ExportFormat:
    export_format = ExportFormat(fmt)
    if export_format is ExportFormat.CSV:
        raise ValueError("Reports export to pdf or excel only")
    return export_format


class ReportsAPI(Resource):
    path = "/accounting"

    @staticmethod
    def _trial_balance_params(
        as_of_date: date | str | None,
        fiscal_period_id: str | None,
        show_zero_balances: bool | None,
        account_type: str | None,
    ) -> dict[str, Any]:
        return {
            "as_of_date": as_of_date,
            "fiscal_period_id": fiscal_period_id,
            "show_zero_balances": show_zero_balances,
            "account_type": account_type,
        }

    @staticmethod
    def _statement_params(
        statement_type: StatementType,
        period_start: date | str,
        period_end: date | str,
        compare_prior: bool | None,
        show_variance: bool | None,
    ) -> dict[str, Any]:
        if statement_type not in STATEMENT_TYPES:
            raise ValueError(f"Unknown statement type: {statement_type}")
        return {
            "type": statement_type,
            "period_start": period_start,
            "period_end": period_end,
            "compare_prior": compare_prior,
            "show_variance": show_variance,
        }

    async def trial_balance(
        self,
        as_of_date: date | str | None = None,
        fiscal_period_id: str | None = None,
        show_zero_balances: bool | None = None,
        account_type: str | None = None,
    ) -> dict[str, Any]:
        return await self._get(
            self._url("trial-balance"),
            params=self._trial_balance_params(
                as_of_date, fiscal_period_id, show_zero_balances, account_type
            ),
        )

    async def export_trial_balance(
        self,
        fmt: ExportFormat | str,
        as_of_date: date | str | None = None,
        fiscal_period_id: str | None = None,
        show_zero_balances: bool | None = None,
        account_type: str | None = None,
    ) -> ExportedFile:
        export_format = report_format(fmt)
        return await self.client.download(
            self._url("trial-balance", "export", export_format.value),
            params=self._trial_balance_params(
                as_of_date, fiscal_period_id, show_zero_balances, account_type
            ),
            filename=export_filename("trial_balance", export_format),
        )

    async def financial_statement(
        self,
        statement_type: StatementType,
        period_start: date | str,
        period_end: date | str,
        compare_prior: bool | None = None,
        show_variance: bool | None = None,
    ) -> dict[str, Any]:
        return await self._get(
            self._url("financial-statements"),
            params=self._statement_params(
                statement_type, period_start, period_end, compare_prior, show_variance
            ),
        )

    async def balance_sheet(
        self, period_start: date | str, period_end: date | str, **options: Any
    ) -> dict[str, Any]:
        return await self.financial_statement("balance-sheet", period_start, period_end, **options)

    async def income_statement(
        self, period_start: date | str, period_end: date | str, **options: Any
    ) -> dict[str, Any]:
        return await self.financial_statement(
            "income-statement", period_start, period_end, **options
        )

    async def cash_flow(
        self, period_start: date | str, period_end: date | str, **options: Any
    ) -> dict[str, Any]:
        return await self.financial_statement("cash-flow", period_start, period_end, **options)

    async def export_financial_statement(
        self,
        fmt: ExportFormat | str,
        statement_type: StatementType,
        period_start: date | str,
        period_end: date | str,
        compare_prior: bool | None = None,
        show_variance: bool | None = None,
    ) -> ExportedFile:
        export_format = report_format(fmt)
        return await self.client.download(
            self._url("financial-statements", "export", export_format.value),
            params=self._statement_params(
                statement_type, period_start, period_end, compare_prior, show_variance
            ),
            filename=export_filename(statement_type.replace("-", "_"), export_format),
        )
