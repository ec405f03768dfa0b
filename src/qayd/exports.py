"""File export helpers (CSV, Excel, PDF downloads)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal
from urllib.parse import unquote

import structlog

if TYPE_CHECKING:
    from qayd.api.client import QaydAPIClient

logger = structlog.get_logger(__name__)

ExportLanguage = Literal["en", "ar", "both"]

_DISPOSITION_STAR = re.compile(r"filename\*\s*=\s*(?:UTF-8|utf-8)''([^;]+)")
_DISPOSITION = re.compile(r'filename\s*=\s*(?:"([^"]+)"|([^;]+))')


class ExportFormat(str, Enum):
    CSV = "csv"
    EXCEL = "excel"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return {"csv": "csv", "excel": "xlsx", "pdf": "pdf"}[self.value]

    @property
    def content_type(self) -> str:
        return {
            "csv": "text/csv",
            "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "pdf": "application/pdf",
        }[self.value]


@dataclass
class ExportedFile:
    """A downloaded file held in memory."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    def save(self, directory: str | Path = ".") -> Path:
        """Write the file into directory and return its path."""
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        # Never let a server-supplied name escape the target directory
        target = target_dir / Path(self.filename).name
        target.write_bytes(self.content)
        logger.info("export_saved", path=str(target), bytes=self.size)
        return target


def filename_from_disposition(header: str | None) -> str | None:
    """Extract the filename from a Content-Disposition header."""
    if not header:
        return None
    match = _DISPOSITION_STAR.search(header)
    if match:
        return unquote(match.group(1).strip()) or None
    match = _DISPOSITION.search(header)
    if not match:
        return None
    name = (match.group(1) or match.group(2) or "").strip().strip('"')
    return name or None


def export_filename(name: str, fmt: ExportFormat | str, on: date | None = None) -> str:
    """Build `<name>_<YYYY-MM-DD>.<ext>`."""
    export_format = ExportFormat(fmt)
    day = (on or date.today()).isoformat()
    return f"{name}_{day}.{export_format.extension}"


def build_export_params(
    filters: dict[str, Any] | None = None,
    language: ExportLanguage | None = None,
    include_inactive: bool | None = None,
) -> dict[str, str]:
    """Build export query parameters, skipping empty filter values."""
    params: dict[str, str] = {}
    for key, value in (filters or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, Enum):
            params[key] = str(value.value)
        else:
            params[key] = str(value)
    if language:
        params["language"] = language
    if include_inactive is not None:
        params["includeInactive"] = "true" if include_inactive else "false"
    return params


# Resource path -> filename stem used for list exports
EXPORT_TARGETS = {
    "customers": "customers",
    "vendors": "vendors",
    "invoices": "invoices",
    "payments": "payments",
    "journals": "journals",
    "coa": "chart_of_accounts",
}


class Exporter:
    """Downloads list exports (`/<resource>/export/<format>`)."""

    def __init__(self, client: QaydAPIClient):
        self.client = client

    async def export(
        self,
        resource: str,
        fmt: ExportFormat | str,
        filters: dict[str, Any] | None = None,
        language: ExportLanguage | None = None,
        include_inactive: bool | None = None,
        on: date | None = None,
    ) -> ExportedFile:
        export_format = ExportFormat(fmt)
        if export_format is ExportFormat.PDF:
            raise ValueError("List exports support csv and excel only")
        stem = EXPORT_TARGETS.get(resource)
        if stem is None:
            raise ValueError(f"Unknown export resource: {resource}")

        params = build_export_params(filters, language, include_inactive)
        exported = await self.client.download(
            f"/{resource}/export/{export_format.value}",
            params=params,
            filename=export_filename(stem, export_format, on),
        )
        logger.info(
            "exported",
            resource=resource,
            format=export_format.value,
            filename=exported.filename,
        )
        return exported

    async def customers(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.export("customers", fmt, **options)

    async def vendors(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.export("vendors", fmt, **options)

    async def invoices(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.export("invoices", fmt, **options)

    async def payments(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.export("payments", fmt, **options)

    async def journals(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.export("journals", fmt, **options)

    async def chart_of_accounts(self, fmt: ExportFormat | str, **options: Any) -> ExportedFile:
        return await self.export("coa", fmt, **options)
