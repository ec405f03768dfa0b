"""Tests for journal drafting and balance validation."""

from datetime import date

import pytest

from qayd.errors import FormValidationError
from qayd.journal_entry import JournalDraft, JournalLineDraft, is_line_valid, journal_totals


def balanced_draft() -> JournalDraft:
    return JournalDraft(
        description_ar="إيجار المكتب",
        transaction_date=date(2024, 1, 15),
        lines=[
            JournalLineDraft(account_id="acc-rent", debit=5000),
            JournalLineDraft(account_id="acc-bank", credit=5000),
        ],
    )


class TestJournalTotals:
    """Tests for debit/credit totals."""

    def test_balanced_within_tolerance(self):
        """Test that sub-cent differences still balance."""
        totals = journal_totals([{"debit": "100.004", "credit": 0}, {"debit": 0, "credit": 100}])

        assert totals.is_balanced
        assert totals.difference == pytest.approx(0.004)

    def test_unbalanced(self):
        """Test a one-cent difference is unbalanced."""
        totals = journal_totals(
            [JournalLineDraft("a", debit=100.01), JournalLineDraft("b", credit=100)]
        )

        assert not totals.is_balanced
        assert totals.total_debit == pytest.approx(100.01)
        assert totals.total_credit == 100

    def test_junk_amounts_count_as_zero(self):
        """Test unparseable amounts contribute nothing."""
        totals = journal_totals([{"debit": "abc", "credit": None}])

        assert totals.total_debit == 0
        assert totals.is_balanced

    @pytest.mark.parametrize(
        "debit,credit,expected",
        [(100, 0, True), (0, "50", True), (10, 10, False), (0, 0, False), ("", None, False)],
    )
    def test_line_has_exactly_one_side(self, debit, credit, expected):
        """Test the one-side-only rule."""
        assert is_line_valid(debit, credit) is expected


class TestJournalDraft:
    """Tests for the editable journal draft."""

    def test_new_draft_has_two_lines(self):
        """Test a new draft starts with the minimum lines."""
        draft = JournalDraft()

        assert len(draft.lines) == 2

    def test_empty_draft_errors_in_order(self):
        """Test validation messages for an untouched draft."""
        assert JournalDraft().errors() == [
            "Description (Arabic) is required",
            "Transaction date is required",
            "All lines must have an account",
            "Each line must have either a debit or credit amount (not both, not neither)",
            "Journal must have non-zero amounts",
        ]

    def test_unbalanced_error_message(self):
        """Test the debit/credit mismatch message."""
        draft = balanced_draft()
        draft.set_amount(1, "credit", "4500")

        assert draft.errors() == ["Debit (5000.00) must equal credit (4500.00)"]
        assert not draft.is_balanced

    def test_negative_amounts_rejected(self):
        """Test negative amounts are reported."""
        draft = balanced_draft()
        draft.lines[0].debit = -5000
        draft.lines[1].credit = -5000

        assert "Amounts cannot be negative" in draft.errors()

    def test_whitespace_description_is_missing(self):
        """Test a blank Arabic description is rejected."""
        draft = balanced_draft()
        draft.description_ar = "   "

        assert draft.errors() == ["Description (Arabic) is required"]

    def test_set_amount_clears_other_side(self):
        """Test entering a debit clears the credit and vice versa."""
        draft = JournalDraft()
        draft.set_amount(0, "credit", 20)
        draft.set_amount(0, "debit", "35.5")

        assert draft.lines[0].debit == 35.5
        assert draft.lines[0].credit == 0

    def test_set_amount_zero_keeps_other_side(self):
        """Test clearing one side leaves the other alone."""
        draft = JournalDraft()
        draft.set_amount(0, "credit", 20)
        draft.set_amount(0, "debit", 0)

        assert draft.lines[0].credit == 20

    def test_set_amount_unknown_side(self):
        """Test an unknown side is rejected."""
        with pytest.raises(ValueError):
            JournalDraft().set_amount(0, "both", 1)  # type: ignore[arg-type]

    def test_remove_line_keeps_minimum(self):
        """Test the last two lines cannot be removed."""
        draft = JournalDraft()

        with pytest.raises(FormValidationError, match="at least 2 lines"):
            draft.remove_line(0)

    def test_add_and_remove_line(self):
        """Test adding then removing a line."""
        draft = JournalDraft()
        draft.add_line(JournalLineDraft("acc-x", debit=1))
        draft.remove_line(2)

        assert len(draft.lines) == 2

    def test_remove_line_bad_index(self):
        """Test removing a line that does not exist."""
        draft = JournalDraft()
        draft.add_line()

        with pytest.raises(IndexError):
            draft.remove_line(5)

    def test_validate_raises_all_errors(self):
        """Test validate carries every error."""
        with pytest.raises(FormValidationError) as exc_info:
            JournalDraft().validate()

        assert len(exc_info.value.errors) == 5
        assert isinstance(exc_info.value, ValueError)

    def test_to_create_dto(self):
        """Test a valid draft becomes a numbered create request."""
        draft = balanced_draft()
        draft.set_account(1, "acc-cash")
        draft.currency = "USD"

        payload = draft.to_create_dto().to_payload()

        assert payload["description_ar"] == "إيجار المكتب"
        assert payload["transaction_date"] == "2024-01-15"
        assert [line["line_number"] for line in payload["lines"]] == [1, 2]
        assert payload["lines"][1]["account_id"] == "acc-cash"
        assert payload["lines"][1]["currency"] == "USD"

    def test_to_create_dto_refuses_invalid_draft(self):
        """Test that an invalid draft cannot be submitted."""
        draft = balanced_draft()
        draft.set_amount(0, "debit", 1)

        with pytest.raises(FormValidationError):
            draft.to_create_dto()

    def test_today(self):
        """Test the today constructor dates the draft."""
        draft = JournalDraft.today("قيد")

        assert draft.transaction_date == date.today()
        assert draft.description_ar == "قيد"
