"""Loader for the navigation registry (navigation.yaml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

NAVIGATION_PATH = Path(__file__).resolve().parent / "navigation.yaml"


@dataclass(frozen=True)
class NavigationItem:
    """A page reachable from the sidebar and command palette."""

    id: str
    href: str
    label_en: str
    label_ar: str
    module: str
    module_en: str
    module_ar: str
    keywords: tuple[str, ...] = field(default_factory=tuple)
    icon: str | None = None
    implemented: bool = True

    def label(self, locale: str = "en") -> str:
        return self.label_ar if locale == "ar" else self.label_en

    def module_label(self, locale: str = "en") -> str:
        return self.module_ar if locale == "ar" else self.module_en


def _parse_bilingual(value: Any, context: str) -> tuple[str, str]:
    if isinstance(value, str):
        return value, value
    if not isinstance(value, dict) or not value.get("en"):
        raise ValueError(f"{context} must be a string or a mapping with 'en'")
    english = str(value["en"])
    return english, str(value.get("ar") or english)


def _parse_item(
    index: int, raw: Any, modules: dict[str, tuple[str, str]]
) -> NavigationItem:
    if not isinstance(raw, dict):
        raise ValueError(f"navigation item #{index} must be a mapping")

    item_id = raw.get("id")
    href = raw.get("href")
    if not item_id or not isinstance(item_id, str):
        raise ValueError(f"navigation item #{index} missing id")
    if not isinstance(href, str) or not href.startswith("/"):
        raise ValueError(f"navigation item {item_id!r} href must start with '/'")

    label_en, label_ar = _parse_bilingual(raw.get("label"), f"navigation item {item_id!r} label")

    module_key = raw.get("module")
    if module_key not in modules:
        raise ValueError(f"navigation item {item_id!r} has unknown module {module_key!r}")
    module_en, module_ar = modules[module_key]

    keywords = raw.get("keywords") or []
    if not isinstance(keywords, list):
        raise ValueError(f"navigation item {item_id!r} keywords must be a list")

    return NavigationItem(
        id=item_id,
        href=href,
        label_en=label_en,
        label_ar=label_ar,
        module=module_key,
        module_en=module_en,
        module_ar=module_ar,
        keywords=tuple(str(k).lower() for k in keywords),
        icon=raw.get("icon"),
        implemented=bool(raw.get("implemented", True)),
    )


def parse_navigation(data: dict[str, Any]) -> tuple[NavigationItem, ...]:
    """Validate raw registry data and build navigation items."""
    raw_modules = data.get("modules") or {}
    if not isinstance(raw_modules, dict):
        raise ValueError("navigation modules must be a mapping")
    modules = {
        key: _parse_bilingual(value, f"module {key!r}") for key, value in raw_modules.items()
    }

    raw_items = data.get("items") or []
    if not isinstance(raw_items, list):
        raise ValueError("navigation items must be a list")

    items = [_parse_item(index, raw, modules) for index, raw in enumerate(raw_items)]

    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"duplicate navigation item id {item.id!r}")
        seen.add(item.id)

    return tuple(items)


@lru_cache
def load_navigation(path: Path | None = None) -> tuple[NavigationItem, ...]:
    """Load the navigation registry.

    Returns:
        Navigation items in registry order.
    """
    source = path or NAVIGATION_PATH
    raw = source.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"navigation file {source} must contain a mapping")
    return parse_navigation(data)
