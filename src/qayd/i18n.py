"""Locale helpers for bilingual (`_en` / `_ar`) records."""

from collections.abc import Mapping
from typing import Any, Literal

from qayd.constants import DEFAULT_LOCALE, RTL_LOCALES, SUPPORTED_LOCALES


def is_valid_locale(locale: str | None) -> bool:
    return locale in SUPPORTED_LOCALES


def normalize_locale(locale: str | None) -> str:
    """Map tags like "ar-QA" or "EN_us" to a supported locale."""
    if not locale:
        return DEFAULT_LOCALE
    base = locale.replace("_", "-").split("-")[0].lower()
    return base if base in SUPPORTED_LOCALES else DEFAULT_LOCALE


def text_direction(locale: str | None) -> Literal["rtl", "ltr"]:
    return "rtl" if normalize_locale(locale) in RTL_LOCALES else "ltr"


def localized(record: Mapping[str, Any], field: str, locale: str | None = None) -> str:
    """Pick `<field>_<locale>`, falling back to the other language, then `<field>`."""
    preferred = normalize_locale(locale)
    order = [preferred] + [code for code in SUPPORTED_LOCALES if code != preferred]
    for code in order:
        value = record.get(f"{field}_{code}")
        if value:
            return str(value)
    value = record.get(field)
    return str(value) if value else ""
