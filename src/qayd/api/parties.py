"""Customer and vendor endpoints."""

from __future__ import annotations

from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile, ExportFormat, ExportLanguage


class PartiesAPI(Resource):
    """CRUD shared by customers and vendors."""

    async def list(
        self, is_active: bool | None = None, search: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._list(self.path, params={"is_active": is_active, "search": search})

    async def get(self, party_id: str) -> dict[str, Any]:
        return await self._get(self._url(party_id))

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        payload = to_payload(data)
        payload.setdefault("is_active", True)
        return await self._post(self.path, json=payload)

    async def update(self, party_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(self._url(party_id), json=to_payload(data))

    async def delete(self, party_id: str) -> None:
        await self._delete(self._url(party_id))

    async def export(
        self,
        fmt: ExportFormat | str,
        language: ExportLanguage | None = None,
        include_inactive: bool | None = None,
        **filters: Any,
    ) -> ExportedFile:
        return await self.client.exports.export(
            self.path.strip("/"),
            fmt,
            filters=filters,
            language=language,
            include_inactive=include_inactive,
        )


class CustomersAPI(PartiesAPI):
    path = "/customers"


class VendorsAPI(PartiesAPI):
    path = "/vendors"
