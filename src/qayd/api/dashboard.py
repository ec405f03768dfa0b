"""Dashboard summary endpoints."""

from __future__ import annotations

from typing import Any

from qayd.api.base import Resource

EMPTY_STATS = {
    "totalRevenue": 0,
    "totalExpenses": 0,
    "netProfit": 0,
    "cashBalance": 0,
    "revenueChange": 0,
    "expenseChange": 0,
    "profitChange": 0,
    "balanceChange": 0,
}

DEFAULT_RECENT_LIMIT = 5


class DashboardAPI(Resource):
    """Headline figures, the revenue/expense chart and recent documents.

    A tenant with no activity gets zeroed stats and empty lists rather
    than an empty body.
    """

    path = "/dashboard"

    async def overview(self) -> dict[str, Any]:
        data = await self._get(self.path)
        return {
            "stats": {**EMPTY_STATS, **(data.get("stats") or {})},
            "chartData": data.get("chartData") or [],
            "recentInvoices": data.get("recentInvoices") or [],
            "recentPayments": data.get("recentPayments") or [],
        }

    async def stats(self) -> dict[str, Any]:
        return {**EMPTY_STATS, **await self._get(self._url("stats"))}

    async def chart(self) -> list[dict[str, Any]]:
        return await self._list(self._url("chart"))

    async def recent_invoices(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[dict[str, Any]]:
        return await self._list(self._url("invoices"), params={"limit": limit})

    async def recent_payments(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[dict[str, Any]]:
        return await self._list(self._url("payments"), params={"limit": limit})
