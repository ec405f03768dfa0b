"""Tests for locale helpers."""

import pytest

from qayd.i18n import is_valid_locale, localized, normalize_locale, text_direction


class TestLocales:
    """Tests for locale normalization."""

    @pytest.mark.parametrize(
        "locale,expected",
        [("ar", "ar"), ("ar-QA", "ar"), ("EN_us", "en"), ("fr", "en"), ("", "en"), (None, "en")],
    )
    def test_normalize_locale(self, locale, expected):
        """Test region tags and unknown locales."""
        assert normalize_locale(locale) == expected

    def test_is_valid_locale(self):
        """Test only exact supported codes are valid."""
        assert is_valid_locale("ar")
        assert not is_valid_locale("ar-QA")
        assert not is_valid_locale(None)

    def test_text_direction(self):
        """Test Arabic is right-to-left."""
        assert text_direction("ar-SA") == "rtl"
        assert text_direction("en") == "ltr"


class TestLocalized:
    """Tests for picking bilingual record fields."""

    def test_prefers_requested_locale(self, mock_customers_response):
        """Test the requested language wins."""
        record = mock_customers_response[0]

        assert localized(record, "name", "ar") == "الدوحة للتجارة"
        assert localized(record, "name", "en") == "Doha Trading"

    def test_falls_back_to_other_language(self, mock_journal_response):
        """Test a missing translation uses the other language."""
        record = dict(mock_journal_response, description_en="")

        assert localized(record, "description", "en") == "إيجار المكتب"

    def test_falls_back_to_plain_field(self):
        """Test records with an unsuffixed field."""
        assert localized({"name": "Cash"}, "name", "ar") == "Cash"
        assert localized({}, "name") == ""
