"""Company settings endpoints."""

from __future__ import annotations

from typing import Any

from qayd.api.base import Resource, to_payload


class CompanySettingsAPI(Resource):
    path = "/settings/company"

    async def get(self) -> dict[str, Any]:
        return await self._get(self.path)

    async def update(self, data: dict[str, Any]) -> dict[str, Any]:
        """Update company profile, tax and currency settings."""
        return await self._patch(self.path, json=to_payload(data))

    async def upload_logo(
        self, filename: str, content: bytes, content_type: str | None = None
    ) -> dict[str, Any]:
        return await self.client.upload(
            self._url("logo"), "logo", filename, content, content_type
        )
