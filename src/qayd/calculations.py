"""Numeric parsing and document total calculations.

Amounts typed by users arrive as strings or numbers of uncertain quality.
Everything here degrades to a default instead of raising, so callers can
compute running totals while a form is still being filled in.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from qayd.constants import (
    CURRENCY_SYMBOLS,
    DEFAULT_CURRENCY,
    PAYMENT_OVER_ALLOCATION_TOLERANCE,
)

T = TypeVar("T")

# Leading numeric prefix, as accepted by parseFloat-style parsing
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


def safe_parse_float(value: Any, default: float = 0.0) -> float:
    """Parse value as a finite float, falling back to default.

    Strings are read up to the first non-numeric character, so "12.5kg"
    yields 12.5 while "abc" yields the default.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else default

    match = _NUMBER_PREFIX.match(str(value))
    if not match:
        return default
    try:
        number = float(match.group(1))
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def safe_parse_int(value: Any, default: int = 0) -> int:
    return math.floor(safe_parse_float(value, default))


def safe_range(
    value: Any,
    min_value: float | None = None,
    max_value: float | None = None,
    default: float = 0.0,
) -> float:
    """Return value if within [min_value, max_value], else default."""
    validated = safe_parse_float(value, default)
    if min_value is not None and validated < min_value:
        return default
    if max_value is not None and validated > max_value:
        return default
    return validated


def safe_array_access(items: Sequence[T] | None, index: int, default: T) -> T:
    if not items or index < 0 or index >= len(items):
        return default
    return items[index]


def clamp(value: Any, min_value: float, max_value: float) -> float:
    validated = safe_parse_float(value, min_value)
    return min(max(validated, min_value), max_value)


def is_positive_number(value: Any) -> bool:
    """True for zero or any positive finite number."""
    return safe_parse_float(value, -1.0) >= 0


def safe_divide(numerator: Any, denominator: Any, default: float = 0.0) -> float:
    top = safe_parse_float(numerator, 0.0)
    bottom = safe_parse_float(denominator, 0.0)
    if bottom == 0:
        return default
    return top / bottom


def sanitize_input(
    value: Any,
    allow_negative: bool = False,
    max_decimals: int | None = None,
    min_value: float | None = None,
    max_value: float | None = None,
    default: float = 0.0,
) -> float:
    """Normalize a numeric form input.

    Bounds are applied first, then negatives are replaced by default
    (unless allowed), then the result is rounded to max_decimals.
    """
    result = safe_parse_float(value, default)

    if min_value is not None:
        result = max(result, min_value)
    if max_value is not None:
        result = min(result, max_value)

    if not allow_negative and result < 0:
        result = default

    if max_decimals is not None:
        # Half-up, not banker's rounding
        multiplier = 10**max_decimals
        result = math.floor(result * multiplier + 0.5) / multiplier

    return result


@dataclass(frozen=True)
class LineItemCalculation:
    quantity: float
    unit_price: float
    subtotal: float
    discount_amount: float
    taxable_amount: float
    tax_amount: float
    total: float
    is_valid: bool


def calculate_line_item(
    quantity: Any,
    unit_price: Any,
    tax_rate: Any = 0,
    discount_percent: Any = 0,
) -> LineItemCalculation:
    """Compute a line's subtotal, discount, tax and total.

    Negative quantities or prices count as 0, and rates outside 0..100
    count as 0. Discount applies before tax.
    """
    final_quantity = safe_range(safe_parse_float(quantity), 0, None, 0)
    final_unit_price = safe_range(safe_parse_float(unit_price), 0, None, 0)
    final_tax_rate = safe_range(safe_parse_float(tax_rate), 0, 100, 0)
    final_discount = safe_range(safe_parse_float(discount_percent), 0, 100, 0)

    subtotal = final_quantity * final_unit_price
    discount_amount = subtotal * (final_discount / 100)
    taxable_amount = subtotal - discount_amount
    tax_amount = taxable_amount * (final_tax_rate / 100)
    total = taxable_amount + tax_amount

    return LineItemCalculation(
        quantity=final_quantity,
        unit_price=final_unit_price,
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        total=total,
        is_valid=final_quantity >= 0 and final_unit_price >= 0,
    )


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float = 0.0
    total_discount: float = 0.0
    total_tax: float = 0.0
    total_amount: float = 0.0
    is_valid: bool = False
    line_count: int = 0


def _line_value(line: Any, *names: str) -> Any:
    for name in names:
        if isinstance(line, Mapping):
            if line.get(name) is not None:
                return line[name]
        elif getattr(line, name, None) is not None:
            return getattr(line, name)
    return 0


def calculate_invoice_totals(lines: Iterable[Any] | None) -> InvoiceTotals:
    """Sum line calculations for a document.

    Lines may be mappings or objects with `quantity`, `unit_price`,
    `tax_rate` and `discount_percent` (or `discount`).
    """
    line_list = list(lines or [])
    if not line_list:
        return InvoiceTotals()

    subtotal = 0.0
    total_discount = 0.0
    total_tax = 0.0
    is_valid = True

    for line in line_list:
        calculation = calculate_line_item(
            _line_value(line, "quantity"),
            _line_value(line, "unit_price"),
            _line_value(line, "tax_rate"),
            _line_value(line, "discount_percent", "discount"),
        )
        subtotal += calculation.subtotal
        total_discount += calculation.discount_amount
        total_tax += calculation.tax_amount
        if not calculation.is_valid:
            is_valid = False

    return InvoiceTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        total_tax=total_tax,
        total_amount=subtotal - total_discount + total_tax,
        is_valid=is_valid,
        line_count=len(line_list),
    )


@dataclass(frozen=True)
class OverAllocation:
    invoice_id: str
    allocated: float
    outstanding: float
    over_amount: float


@dataclass
class AllocationValidation:
    is_valid: bool
    total_allocated: float
    remaining_amount: float
    errors: list[str] = field(default_factory=list)
    over_allocations: list[OverAllocation] = field(default_factory=list)


def validate_payment_allocations(
    allocations: Iterable[Any],
    payment_amount: Any,
    outstanding: Mapping[str, float],
) -> AllocationValidation:
    """Check payment allocations against invoice balances and the payment amount.

    Args:
        allocations: Mappings or objects with `invoice_id` and `amount`.
        payment_amount: Total amount of the payment.
        outstanding: Outstanding balance per invoice id.
    """
    errors: list[str] = []
    over_allocations: list[OverAllocation] = []
    total_allocated = 0.0
    validated_payment = safe_parse_float(payment_amount, 0.0)

    for allocation in allocations:
        invoice_id = str(_line_value(allocation, "invoice_id"))
        allocated = safe_parse_float(_line_value(allocation, "amount"), 0.0)
        balance = safe_parse_float(outstanding.get(invoice_id), 0.0)
        total_allocated += allocated

        if allocated - balance > PAYMENT_OVER_ALLOCATION_TOLERANCE:
            over_allocations.append(
                OverAllocation(
                    invoice_id=invoice_id,
                    allocated=allocated,
                    outstanding=balance,
                    over_amount=allocated - balance,
                )
            )
            errors.append(
                f"Invoice {invoice_id}: Allocated {allocated:.2f} "
                f"exceeds outstanding {balance:.2f}"
            )

    if total_allocated - validated_payment > PAYMENT_OVER_ALLOCATION_TOLERANCE:
        errors.append(
            f"Total allocated ({total_allocated:.2f}) "
            f"exceeds payment amount ({validated_payment:.2f})"
        )

    return AllocationValidation(
        is_valid=not errors,
        total_allocated=total_allocated,
        remaining_amount=validated_payment - total_allocated,
        errors=errors,
        over_allocations=over_allocations,
    )


def format_currency(amount: Any, currency: str = DEFAULT_CURRENCY, locale: str = "en") -> str:
    """Format an amount with two decimals and the currency symbol.

    English puts the symbol first ("$1,234.50", "QAR 1,234.50"); Arabic
    puts the code after the number. Unknown codes fall back to
    "<code> <amount>".
    """
    value = safe_parse_float(amount, 0.0)
    code = (currency or "").upper()
    if not _CURRENCY_CODE.match(code):
        return f"{currency} {value:.2f}"

    number = f"{abs(value):,.2f}"
    sign = "-" if value < 0 else ""
    if locale.split("-")[0] == "ar":
        return f"{sign}{number} {code}"

    symbol = CURRENCY_SYMBOLS.get(code, code)
    if len(symbol) == 1:
        return f"{sign}{symbol}{number}"
    return f"{sign}{symbol} {number}"
