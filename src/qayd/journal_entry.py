"""Double-entry journal drafting and balance checks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal, cast

from qayd.calculations import safe_parse_float
from qayd.constants import JOURNAL_BALANCE_TOLERANCE, MIN_JOURNAL_LINES
from qayd.errors import FormValidationError
from qayd.models import CreateJournalDto, DateLike, JournalLineInput, JournalType

Side = Literal["debit", "credit"]


@dataclass(frozen=True)
class JournalTotals:
    total_debit: float
    total_credit: float
    difference: float
    is_balanced: bool


def journal_totals(lines: Iterable[Any]) -> JournalTotals:
    """Sum debits and credits; balanced means they differ by less than the tolerance."""
    total_debit = 0.0
    total_credit = 0.0
    for line in lines:
        if isinstance(line, dict):
            debit, credit = line.get("debit"), line.get("credit")
        else:
            debit, credit = line.debit, line.credit
        total_debit += safe_parse_float(debit)
        total_credit += safe_parse_float(credit)

    difference = total_debit - total_credit
    return JournalTotals(
        total_debit=total_debit,
        total_credit=total_credit,
        difference=difference,
        is_balanced=abs(difference) < JOURNAL_BALANCE_TOLERANCE,
    )


def is_line_valid(debit: Any, credit: Any) -> bool:
    """A line carries exactly one of debit or credit."""
    has_debit = safe_parse_float(debit) != 0
    has_credit = safe_parse_float(credit) != 0
    return has_debit != has_credit


@dataclass
class JournalLineDraft:
    account_id: str = ""
    debit: float = 0.0
    credit: float = 0.0
    description_ar: str | None = None
    description_en: str | None = None
    cost_center_id: str | None = None

    @property
    def is_valid(self) -> bool:
        return is_line_valid(self.debit, self.credit)


@dataclass
class JournalDraft:
    """An unsaved journal entry being edited line by line."""

    description_ar: str = ""
    transaction_date: DateLike | None = None
    journal_type: JournalType | str = JournalType.GENERAL
    description_en: str | None = None
    reference_number: str | None = None
    currency: str | None = None
    exchange_rate: float | None = None
    notes: str | None = None
    lines: list[JournalLineDraft] = field(
        default_factory=lambda: [JournalLineDraft() for _ in range(MIN_JOURNAL_LINES)]
    )

    def add_line(self, line: JournalLineDraft | None = None) -> JournalLineDraft:
        new_line = line or JournalLineDraft()
        self.lines.append(new_line)
        return new_line

    def remove_line(self, index: int) -> None:
        if len(self.lines) <= MIN_JOURNAL_LINES:
            raise FormValidationError(f"Journal must have at least {MIN_JOURNAL_LINES} lines")
        if index < 0 or index >= len(self.lines):
            raise IndexError(f"No journal line at position {index}")
        del self.lines[index]

    def set_account(self, index: int, account_id: str) -> None:
        self.lines[index].account_id = account_id

    def set_amount(self, index: int, side: Side, value: Any) -> None:
        """Set one side of a line; a positive amount clears the other side."""
        if side not in ("debit", "credit"):
            raise ValueError(f"Unknown side: {side}")
        line = self.lines[index]
        amount = safe_parse_float(value)
        if side == "debit":
            line.debit = amount
            if amount > 0:
                line.credit = 0.0
        else:
            line.credit = amount
            if amount > 0:
                line.debit = 0.0

    @property
    def totals(self) -> JournalTotals:
        return journal_totals(self.lines)

    @property
    def is_balanced(self) -> bool:
        return self.totals.is_balanced

    def errors(self) -> list[str]:
        """Validation errors in the order a user should fix them."""
        errors: list[str] = []
        if not self.description_ar or not self.description_ar.strip():
            errors.append("Description (Arabic) is required")
        if not self.transaction_date:
            errors.append("Transaction date is required")
        if any(not line.account_id for line in self.lines):
            errors.append("All lines must have an account")
        if any(not line.is_valid for line in self.lines):
            errors.append(
                "Each line must have either a debit or credit amount (not both, not neither)"
            )
        if any(line.debit < 0 or line.credit < 0 for line in self.lines):
            errors.append("Amounts cannot be negative")

        totals = self.totals
        if not totals.is_balanced:
            errors.append(
                f"Debit ({totals.total_debit:.2f}) must equal credit ({totals.total_credit:.2f})"
            )
        if totals.total_debit == 0:
            errors.append("Journal must have non-zero amounts")
        return errors

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise FormValidationError(errors)

    def to_create_dto(self) -> CreateJournalDto:
        """Validate and build the create request."""
        self.validate()
        return CreateJournalDto(
            description_ar=self.description_ar.strip(),
            description_en=self.description_en,
            transaction_date=cast(DateLike, self.transaction_date),
            journal_type=self.journal_type,
            reference_number=self.reference_number,
            currency=self.currency,
            exchange_rate=self.exchange_rate,
            notes=self.notes,
            lines=[
                JournalLineInput(
                    line_number=index,
                    account_id=line.account_id,
                    debit=line.debit,
                    credit=line.credit,
                    description_ar=line.description_ar,
                    description_en=line.description_en,
                    cost_center_id=line.cost_center_id,
                )
                for index, line in enumerate(self.lines, start=1)
            ],
        )

    @classmethod
    def today(cls, description_ar: str = "", **kwargs: Any) -> JournalDraft:
        """Start a draft dated today."""
        return cls(description_ar=description_ar, transaction_date=date.today(), **kwargs)
