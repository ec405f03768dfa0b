"""Shared helpers for resource APIs."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from qayd.api.client import QaydAPIClient

# Keys that may appear next to `data` in a response envelope
ENVELOPE_KEYS = frozenset(
    {"data", "message", "success", "status", "meta", "total", "page", "limit", "count"}
)


def extract_items(result: Any) -> list[dict[str, Any]]:
    """Return the list of records from a list, enveloped or paged response."""
    if isinstance(result, list):
        return result
    if isinstance(result, dict):
        for key in ("data", "items"):
            if key in result:
                return extract_items(result[key])
    return []


def extract_record(result: Any) -> dict[str, Any]:
    """Return the record from a `{"data": {...}}` envelope or a bare dict."""
    if not isinstance(result, dict):
        return {}
    inner = result.get("data")
    if isinstance(inner, dict) and set(result) <= ENVELOPE_KEYS:
        return inner
    return result


def clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop empty filters and serialize values for the query string."""
    cleaned: dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        elif isinstance(value, Enum):
            cleaned[key] = value.value
        elif isinstance(value, (date, datetime)):
            cleaned[key] = value.isoformat()
        else:
            cleaned[key] = value
    return cleaned


def to_payload(data: Any) -> dict[str, Any]:
    """Accept a DTO (anything with `to_payload`) or a plain mapping."""
    if hasattr(data, "to_payload"):
        return data.to_payload()
    return dict(data)


class Resource:
    """Base class for a REST resource rooted at `path`."""

    path = ""

    def __init__(self, client: QaydAPIClient):
        self.client = client

    def _url(self, *parts: Any) -> str:
        return "/".join([self.path, *(str(part) for part in parts)])

    async def _list(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        result = await self.client.get(path, params=clean_params(params))
        return extract_items(result)

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        result = await self.client.get(path, params=clean_params(params))
        return extract_record(result)

    async def _post(self, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        return extract_record(await self.client.post(path, json=json))

    async def _put(self, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        return extract_record(await self.client.put(path, json=json))

    async def _patch(self, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        return extract_record(await self.client.patch(path, json=json))

    async def _delete(self, path: str) -> None:
        await self.client.delete(path)
