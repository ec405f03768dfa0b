"""Tests for command palette search, recents and favorites."""

import pytest

from qayd.config.navigation import load_navigation
from qayd.constants import MAX_SEARCH_LENGTH
from qayd.search import (
    Favorites,
    RecentItems,
    find_by_href,
    group_by_module,
    normalize_query,
    score_item,
    search_navigation,
)


def ids(items):
    return [item.id for item in items]


class TestSearchNavigation:
    """Tests for ranking navigation items."""

    def test_empty_query_returns_registry_order(self):
        """Test that a blank query lists every page."""
        results = search_navigation("   ")

        assert results == list(load_navigation())
        assert len(results) == 25

    def test_exact_label_ranks_first(self):
        """Test an exact label match."""
        assert search_navigation("invoices")[0].id == "invoices"

    def test_label_prefix_beats_keyword(self):
        """Test a label prefix outranks an exact keyword on another page."""
        assert ids(search_navigation("payment"))[:2] == ["sales-payments", "expenses"]

    def test_word_prefix_beats_keyword(self):
        """Test matching the start of a later word in the label."""
        assert ids(search_navigation("ledger"))[:2] == ["general-ledger", "coa"]

    def test_ties_keep_registry_order(self):
        """Test equal scores keep registry order."""
        assert ids(search_navigation("bank"))[:2] == ["bank-accounts", "reconciliation"]

    def test_id_match(self):
        """Test matching an item id."""
        assert search_navigation("coa")[0].id == "coa"

    def test_query_is_normalized(self):
        """Test case and surrounding whitespace are ignored."""
        assert search_navigation("  JOURNAL ")[0].id == "journals"

    def test_no_match(self):
        """Test an unmatched query."""
        assert search_navigation("xyzzy") == []

    def test_limit(self):
        """Test the result limit."""
        assert len(search_navigation("", limit=3)) == 3
        assert len(search_navigation("bank", limit=1)) == 1

    def test_implemented_only(self):
        """Test hiding pages that are not built yet."""
        results = search_navigation("", implemented_only=True)

        assert len(results) == 22
        assert "purchase-orders" not in ids(results)
        assert search_navigation("depreciation", implemented_only=True) == []

    def test_arabic_label(self):
        """Test searching by Arabic label."""
        assert search_navigation("الفواتير", locale="ar")[0].id == "invoices"

    def test_english_label_matches_in_arabic_locale(self):
        """Test English labels still match when the locale is Arabic."""
        assert search_navigation("invoices", locale="ar")[0].id == "invoices"

    def test_custom_items(self):
        """Test searching a caller-supplied list."""
        items = [item for item in load_navigation() if item.module == "settings"]

        assert ids(search_navigation("users", items=items)) == ["settings-users"]

    def test_normalize_query_truncates(self):
        """Test overlong queries are cut to the maximum length."""
        assert len(normalize_query("a" * (MAX_SEARCH_LENGTH + 50))) == MAX_SEARCH_LENGTH
        assert normalize_query(None) == ""

    def test_score_subsequence(self):
        """Test loose in-order character matches score lowest."""
        item = find_by_href("/settings/company")

        assert score_item(item, "cmpy") == 10
        assert score_item(item, "zz") == 0


class TestGrouping:
    """Tests for grouping and href lookup."""

    def test_group_by_module(self):
        """Test groups follow registry order."""
        grouped = group_by_module(load_navigation())

        assert list(grouped) == [
            "Main",
            "Accounting",
            "Sales",
            "Purchases",
            "Banking",
            "Assets",
            "Tax",
            "Reports",
            "Settings",
        ]
        assert len(grouped["Accounting"]) == 5

    def test_group_by_module_arabic(self):
        """Test Arabic module labels."""
        grouped = group_by_module(load_navigation(), locale="ar")

        assert "المحاسبة" in grouped

    def test_find_by_href(self):
        """Test looking up a page by href."""
        assert find_by_href("/sales/invoices").id == "invoices"
        assert find_by_href("/nowhere") is None


class TestRecentItems:
    """Tests for the most-recently-used list."""

    def test_newest_first(self):
        """Test added hrefs go to the front."""
        recent = RecentItems()
        recent.add("/dashboard")
        recent.add("/sales/invoices")

        assert recent.to_list() == ["/sales/invoices", "/dashboard"]

    def test_readding_moves_to_front(self):
        """Test revisiting a page does not duplicate it."""
        recent = RecentItems(hrefs=["/a", "/b", "/c"])
        recent.add("/c")

        assert recent.to_list() == ["/c", "/a", "/b"]

    def test_limit(self):
        """Test the oldest entries drop off."""
        recent = RecentItems(limit=2)
        for href in ("/a", "/b", "/c"):
            recent.add(href)

        assert list(recent) == ["/c", "/b"]
        assert len(recent) == 2

    def test_clear(self):
        """Test clearing the list."""
        recent = RecentItems(hrefs=["/a"])
        recent.clear()

        assert len(recent) == 0


class TestFavorites:
    """Tests for pinned pages."""

    def test_toggle(self):
        """Test toggling adds then removes."""
        favorites = Favorites()

        assert favorites.toggle("/reports") is True
        assert favorites.is_favorite("/reports")
        assert favorites.toggle("/reports") is False
        assert not favorites.is_favorite("/reports")

    @pytest.mark.parametrize("hrefs", [["/a", "/b", "/a"], ("/a", "/b")])
    def test_initial_hrefs_are_deduplicated(self, hrefs):
        """Test duplicates in the stored list are dropped."""
        favorites = Favorites(hrefs)

        assert favorites.to_list() == ["/a", "/b"]
        assert len(favorites) == 2
