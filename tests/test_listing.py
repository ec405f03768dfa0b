"""Tests for list filtering, pagination and virtual windows."""

from dataclasses import dataclass

import pytest

from qayd.listing import VirtualWindow, filter_records, paginate


@dataclass
class Row:
    code: str
    name: str | None = None


class TestFilterRecords:
    """Tests for text filtering."""

    def test_matches_any_field(self, mock_customers_response):
        """Test case-insensitive matching across fields."""
        results = filter_records(mock_customers_response, "PEARL", ["code", "name_en"])

        assert [r["code"] for r in results] == ["C-002"]

    def test_arabic_text(self, mock_customers_response):
        """Test matching Arabic names."""
        results = filter_records(mock_customers_response, "الدوحة", ["name_ar"])

        assert [r["code"] for r in results] == ["C-001"]

    def test_blank_search_keeps_everything(self, mock_customers_response):
        """Test a blank filter."""
        assert len(filter_records(mock_customers_response, "  ", ["code"])) == 2
        assert len(filter_records(mock_customers_response, None, ["code"])) == 2

    def test_objects_and_missing_fields(self):
        """Test attribute access and None values."""
        rows = [Row("A-1", "Alpha"), Row("B-2")]

        assert filter_records(rows, "b-", ["code", "name", "missing"]) == [rows[1]]


class TestPaginate:
    """Tests for page slicing."""

    def test_middle_page(self):
        """Test a full page in the middle."""
        page = paginate(list(range(23)), page=2, page_size=10)

        assert page.items == list(range(10, 20))
        assert page.total_pages == 3
        assert page.has_next and page.has_previous
        assert (page.start_index, page.end_index) == (11, 20)

    def test_last_page(self):
        """Test the partial last page."""
        page = paginate(list(range(23)), page=3, page_size=10)

        assert page.items == [20, 21, 22]
        assert not page.has_next
        assert page.end_index == 23

    @pytest.mark.parametrize("requested,expected", [(0, 1), (-4, 1), (99, 3)])
    def test_out_of_range_pages_are_clamped(self, requested, expected):
        """Test page numbers outside the range."""
        assert paginate(list(range(23)), page=requested).page == expected

    def test_empty(self):
        """Test an empty list still has one page."""
        page = paginate([], page=5)

        assert page.items == []
        assert page.page == 1
        assert page.total_pages == 1
        assert (page.start_index, page.end_index) == (0, 0)
        assert not page.has_next and not page.has_previous

    def test_invalid_page_size(self):
        """Test page sizes outside the offered options."""
        with pytest.raises(ValueError, match="page_size"):
            paginate([1, 2, 3], page_size=7)


class TestVirtualWindow:
    """Tests for virtualized list ranges."""

    def test_fixed_height_range(self):
        """Test visible rows with overscan."""
        window = VirtualWindow(100, item_height=20)

        assert window.visible_range(0, 100) == (0, 7)
        assert window.visible_range(200, 100) == (7, 17)
        assert window.total_height == 2000

    def test_range_at_bottom(self):
        """Test the range is clamped to the last row."""
        window = VirtualWindow(100, item_height=20)

        assert window.visible_range(1900, 100) == (92, 99)

    def test_empty_list(self):
        """Test an empty list renders nothing."""
        assert VirtualWindow(0).visible_range(0, 500) == (0, -1)
        assert VirtualWindow(0).total_height == 0

    def test_negative_count(self):
        """Test a negative item count."""
        with pytest.raises(ValueError):
            VirtualWindow(-1)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"item_height": 0},
            {"item_height": -20},
            {"estimated_item_height": 0},
            {"estimated_item_height": -1.5},
        ],
    )
    def test_non_positive_heights(self, kwargs):
        """Test zero or negative row heights are refused."""
        with pytest.raises(ValueError, match="must be positive"):
            VirtualWindow(10, **kwargs)

    def test_resize_negative_count(self):
        """Test resizing to a negative count."""
        with pytest.raises(ValueError):
            VirtualWindow(3).resize(-1)

    def test_measured_heights(self):
        """Test measured rows replace the estimate."""
        window = VirtualWindow(5, estimated_item_height=50, overscan=0)
        window.measure(0, 100)

        assert window.offset_of(1) == 100
        assert window.total_height == 300
        assert window.visible_range(0, 120) == (0, 1)

    def test_measure_ignored(self):
        """Test measurements in fixed mode or with bad values."""
        fixed = VirtualWindow(5, item_height=20)
        fixed.measure(0, 100)
        dynamic = VirtualWindow(5)
        dynamic.measure(0, -10)
        dynamic.measure(9, 80)

        assert fixed.height_of(0) == 20
        assert dynamic.total_height == 250

    def test_resize_drops_stale_measurements(self):
        """Test shrinking the list forgets removed rows."""
        window = VirtualWindow(5)
        window.measure(4, 10)
        window.resize(3)

        assert window.total_height == 150

    @pytest.mark.parametrize(
        "index,align,expected",
        [(50, "start", 1000), (50, "center", 960), (50, "end", 920), (99, "start", 1900)],
    )
    def test_scroll_offset_for(self, index, align, expected):
        """Test scrolling a row into view."""
        window = VirtualWindow(100, item_height=20)

        assert window.scroll_offset_for(index, 100, align=align) == expected

    def test_scroll_offset_never_negative(self):
        """Test rows near the top clamp to zero."""
        assert VirtualWindow(100, item_height=20).scroll_offset_for(1, 100, "end") == 0
