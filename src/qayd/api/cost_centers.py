"""Cost center endpoints."""

from __future__ import annotations

from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile
from qayd.models import CreateCostCenterDto


class CostCentersAPI(Resource):
    path = "/settings/cost-centers"

    async def list(
        self, is_active: bool | None = None, search: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._list(self.path, params={"is_active": is_active, "search": search})

    async def get(self, cost_center_id: str) -> dict[str, Any]:
        return await self._get(self._url(cost_center_id))

    async def create(self, data: CreateCostCenterDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(self, cost_center_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(self._url(cost_center_id), json=to_payload(data))

    async def delete(self, cost_center_id: str) -> None:
        await self._delete(self._url(cost_center_id))

    async def export_pdf(self, cost_center_id: str) -> ExportedFile:
        return await self.client.download(self._url(cost_center_id, "export", "pdf"))
