"""Command palette search over the navigation registry."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from qayd.config.navigation import NavigationItem, load_navigation
from qayd.constants import MAX_SEARCH_LENGTH

RECENT_ITEMS_LIMIT = 5

# Match strength, strongest first
SCORE_EXACT_LABEL = 100
SCORE_LABEL_PREFIX = 80
SCORE_WORD_PREFIX = 70
SCORE_LABEL_CONTAINS = 60
SCORE_EXACT_KEYWORD = 50
SCORE_KEYWORD_CONTAINS = 40
SCORE_HREF_CONTAINS = 30
SCORE_MODULE_CONTAINS = 20
SCORE_SUBSEQUENCE = 10


def normalize_query(query: str | None) -> str:
    return (query or "").strip().lower()[:MAX_SEARCH_LENGTH]


def _is_subsequence(needle: str, haystack: str) -> bool:
    remaining = iter(haystack)
    return all(char in remaining for char in needle)


def score_item(item: NavigationItem, query: str, locale: str = "en") -> int:
    """Score how well an item matches an already normalized query; 0 means no match."""
    labels = {item.label(locale).lower(), item.label_en.lower()}

    if query in labels:
        return SCORE_EXACT_LABEL
    if any(label.startswith(query) for label in labels):
        return SCORE_LABEL_PREFIX
    if any(word.startswith(query) for label in labels for word in label.split()):
        return SCORE_WORD_PREFIX
    if any(query in label for label in labels):
        return SCORE_LABEL_CONTAINS
    if query == item.id or query in item.keywords:
        return SCORE_EXACT_KEYWORD
    if query in item.id or any(query in keyword for keyword in item.keywords):
        return SCORE_KEYWORD_CONTAINS
    if query in item.href.lower():
        return SCORE_HREF_CONTAINS
    modules = {item.module_label(locale).lower(), item.module_en.lower()}
    if any(query in module for module in modules):
        return SCORE_MODULE_CONTAINS
    compact = query.replace(" ", "")
    if len(compact) > 1 and any(_is_subsequence(compact, label) for label in labels):
        return SCORE_SUBSEQUENCE
    return 0


def search_navigation(
    query: str | None,
    items: Sequence[NavigationItem] | None = None,
    locale: str = "en",
    limit: int | None = None,
    implemented_only: bool = False,
) -> list[NavigationItem]:
    """Rank navigation items for a query.

    An empty query returns every item in registry order. Otherwise items
    are ordered by match strength, ties keeping registry order.
    """
    candidates = list(items if items is not None else load_navigation())
    if implemented_only:
        candidates = [item for item in candidates if item.implemented]

    normalized = normalize_query(query)
    if not normalized:
        return candidates[:limit] if limit is not None else candidates

    scored = [(score_item(item, normalized, locale), item) for item in candidates]
    ranked = [item for score, item in sorted(scored, key=lambda pair: -pair[0]) if score > 0]
    return ranked[:limit] if limit is not None else ranked


def group_by_module(
    items: Iterable[NavigationItem], locale: str = "en"
) -> dict[str, list[NavigationItem]]:
    """Group items under their module label, keeping first-seen order."""
    grouped: dict[str, list[NavigationItem]] = {}
    for item in items:
        grouped.setdefault(item.module_label(locale), []).append(item)
    return grouped


def find_by_href(href: str, items: Sequence[NavigationItem] | None = None) -> NavigationItem | None:
    for item in items if items is not None else load_navigation():
        if item.href == href:
            return item
    return None


class RecentItems:
    """Most-recently-used page hrefs, newest first."""

    def __init__(self, limit: int = RECENT_ITEMS_LIMIT, hrefs: Iterable[str] = ()):
        self.limit = limit
        self._hrefs: list[str] = []
        for href in reversed(list(hrefs)):
            self.add(href)

    def add(self, href: str) -> None:
        if href in self._hrefs:
            self._hrefs.remove(href)
        self._hrefs.insert(0, href)
        del self._hrefs[self.limit :]

    def clear(self) -> None:
        self._hrefs.clear()

    def __iter__(self):
        return iter(list(self._hrefs))

    def __len__(self) -> int:
        return len(self._hrefs)

    def to_list(self) -> list[str]:
        return list(self._hrefs)


class Favorites:
    """Pinned page hrefs in the order they were added."""

    def __init__(self, hrefs: Iterable[str] = ()):
        self._hrefs: list[str] = list(dict.fromkeys(hrefs))

    def toggle(self, href: str) -> bool:
        """Add or remove href; returns True if it is now a favorite."""
        if href in self._hrefs:
            self._hrefs.remove(href)
            return False
        self._hrefs.append(href)
        return True

    def is_favorite(self, href: str) -> bool:
        return href in self._hrefs

    def __iter__(self):
        return iter(list(self._hrefs))

    def __len__(self) -> int:
        return len(self._hrefs)

    def to_list(self) -> list[str]:
        return list(self._hrefs)
