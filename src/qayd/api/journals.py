"""Journal entry endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from qayd.api.base import Resource, to_payload
from qayd.exports import ExportedFile, ExportFormat
from qayd.models import CreateJournalDto, JournalLineInput, UpdateJournalDto


class JournalsAPI(Resource):
    """Journals: CRUD, draft line replacement and the submit/approve/post workflow."""

    path = "/journals"

    async def list(
        self,
        status: str | None = None,
        journal_type: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._list(
            self.path,
            params={
                "status": status,
                "journal_type": journal_type,
                "start_date": start_date,
                "end_date": end_date,
            },
        )

    async def get(self, journal_id: str) -> dict[str, Any]:
        return await self._get(self._url(journal_id))

    async def create(self, data: CreateJournalDto | dict[str, Any]) -> dict[str, Any]:
        return await self._post(self.path, json=to_payload(data))

    async def update(
        self, journal_id: str, data: UpdateJournalDto | dict[str, Any]
    ) -> dict[str, Any]:
        """Update header fields of a draft journal."""
        return await self._patch(self._url(journal_id), json=to_payload(data))

    async def update_lines(
        self, journal_id: str, lines: list[JournalLineInput]
    ) -> dict[str, Any]:
        """Replace all lines of a draft journal."""
        payload = [
            {**line.to_lines_payload(), "line_number": line.line_number or index}
            for index, line in enumerate(lines, start=1)
        ]
        return await self._put(self._url(journal_id, "lines"), json={"lines": payload})

    async def delete(self, journal_id: str) -> None:
        await self._delete(self._url(journal_id))

    async def submit(self, journal_id: str) -> dict[str, Any]:
        return await self._post(self._url(journal_id, "submit"))

    async def approve(self, journal_id: str) -> dict[str, Any]:
        return await self._post(self._url(journal_id, "approve"))

    async def post(self, journal_id: str) -> dict[str, Any]:
        """Post an approved journal to the ledger."""
        return await self._post(self._url(journal_id, "post"))

    async def export(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.client.exports.journals(fmt, **options)
