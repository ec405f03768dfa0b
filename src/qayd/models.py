"""Request DTOs and status enumerations for Qayd records.

Records returned by the API are plain dicts; only request bodies are
modelled here so defaults (currency, exchange rate, ISO dates) are applied
in one place before anything is sent.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from qayd.constants import DEFAULT_CURRENCY, DEFAULT_EXCHANGE_RATE

DateLike = date | datetime | str


class JournalStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    POSTED = "posted"
    REVERSED = "reversed"


class JournalType(str, Enum):
    GENERAL = "general"
    SALES = "sales"
    PURCHASE = "purchase"
    RECEIPT = "receipt"
    PAYMENT = "payment"
    EXPENSE = "expense"
    DEPRECIATION = "depreciation"
    ADJUSTMENT = "adjustment"
    OPENING = "opening"
    CLOSING = "closing"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    POSTED = "posted"
    PAID = "paid"
    PARTIAL = "partial"


class PaymentStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    POSTED = "posted"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"


class QuotationStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CONVERTED = "converted"


class PurchaseOrderStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    RECEIVED = "received"
    CLOSED = "closed"


class ExpenseStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class ExpenseCategory(str, Enum):
    SUPPLIES = "supplies"
    TRAVEL = "travel"
    MEALS = "meals"
    UTILITIES = "utilities"
    RENT = "rent"
    MARKETING = "marketing"
    OTHER = "other"


class AssetStatus(str, Enum):
    ACTIVE = "active"
    FULLY_DEPRECIATED = "fully-depreciated"
    DISPOSED = "disposed"
    SOLD = "sold"


class ReconciliationStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class VatReturnStatus(str, Enum):
    DRAFT = "draft"
    CALCULATED = "calculated"
    FILED = "filed"
    PAID = "paid"
    CANCELLED = "cancelled"


class VatRateType(str, Enum):
    STANDARD = "standard"
    REDUCED = "reduced"
    ZERO = "zero"
    EXEMPT = "exempt"


def iso_date(value: DateLike | None) -> str | None:
    """Serialize a date or datetime as ISO-8601; strings pass through."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop unset (None) fields and unwrap enums."""
    return {key: _enum_value(value) for key, value in data.items() if value is not None}


@dataclass
class JournalLineInput:
    account_id: str
    debit: float = 0.0
    credit: float = 0.0
    line_number: int = 0
    description_ar: str | None = None
    description_en: str | None = None
    cost_center_id: str | None = None
    currency: str | None = None
    exchange_rate: float | None = None
    reference: str | None = None
    reference_type: str | None = None
    reference_id: str | None = None

    def to_payload(
        self, currency: str | None = None, exchange_rate: float | None = None
    ) -> dict[str, Any]:
        """Serialize the line, inheriting the document currency and rate."""
        return compact(
            {
                "line_number": self.line_number,
                "account_id": self.account_id,
                "description_ar": self.description_ar,
                "description_en": self.description_en,
                "cost_center_id": self.cost_center_id,
                "debit": self.debit,
                "credit": self.credit,
                "currency": self.currency or currency or DEFAULT_CURRENCY,
                "exchange_rate": self.exchange_rate or exchange_rate or DEFAULT_EXCHANGE_RATE,
                "reference": self.reference,
                "reference_type": self.reference_type,
                "reference_id": self.reference_id,
            }
        )

    def to_lines_payload(self) -> dict[str, Any]:
        """Serialize for the draft line replacement endpoint."""
        return compact(
            {
                "line_number": self.line_number,
                "account_id": self.account_id,
                "description_ar": self.description_ar,
                "description_en": self.description_en,
                "cost_center_id": self.cost_center_id,
                "debit": self.debit,
                "credit": self.credit,
            }
        )


@dataclass
class CreateJournalDto:
    description_ar: str
    transaction_date: DateLike
    lines: list[JournalLineInput]
    journal_type: JournalType | str = JournalType.GENERAL
    journal_number: str | None = None
    reference_number: str | None = None
    description_en: str | None = None
    posting_date: DateLike | None = None
    currency: str | None = None
    exchange_rate: float | None = None
    notes: str | None = None
    attachment_url: str | None = None
    source_module: str | None = None
    source_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        currency = self.currency or DEFAULT_CURRENCY
        exchange_rate = self.exchange_rate or DEFAULT_EXCHANGE_RATE
        payload = compact(
            {
                "journal_number": self.journal_number,
                "journal_type": self.journal_type,
                "reference_number": self.reference_number,
                "description_ar": self.description_ar,
                "description_en": self.description_en,
                "transaction_date": iso_date(self.transaction_date),
                "posting_date": iso_date(self.posting_date),
                "currency": currency,
                "exchange_rate": exchange_rate,
                "notes": self.notes,
                "attachment_url": self.attachment_url,
                "source_module": self.source_module,
                "source_id": self.source_id,
            }
        )
        payload["lines"] = [
            line.to_payload(self.currency, self.exchange_rate) for line in self.lines
        ]
        return payload


@dataclass
class UpdateJournalDto:
    description_ar: str | None = None
    description_en: str | None = None
    transaction_date: DateLike | None = None
    posting_date: DateLike | None = None
    currency: str | None = None
    exchange_rate: float | None = None
    notes: str | None = None
    attachment_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return compact(
            {
                "description_ar": self.description_ar,
                "description_en": self.description_en,
                "transaction_date": iso_date(self.transaction_date),
                "posting_date": iso_date(self.posting_date),
                "currency": self.currency,
                "exchange_rate": self.exchange_rate,
                "notes": self.notes,
                "attachment_url": self.attachment_url,
            }
        )


@dataclass
class InvoiceLineInput:
    quantity: float
    unit_price: float
    tax_rate: float = 0.0
    discount_percent: float = 0.0
    line_number: int = 0
    description_ar: str | None = None
    description_en: str | None = None
    account_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return compact(
            {
                "line_number": self.line_number,
                "description_ar": self.description_ar,
                "description_en": self.description_en,
                "quantity": self.quantity,
                "unit_price": self.unit_price,
                "tax_rate": self.tax_rate,
                "discount_percent": self.discount_percent,
                "account_id": self.account_id,
            }
        )


@dataclass
class CreateInvoiceDto:
    invoice_type: str
    party_id: str
    party_type: str
    invoice_date: DateLike
    lines: list[InvoiceLineInput]
    due_date: DateLike | None = None
    currency: str | None = None
    exchange_rate: float | None = None
    notes: str | None = None
    attachment_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = compact(
            {
                "invoice_type": self.invoice_type,
                "party_id": self.party_id,
                "party_type": self.party_type,
                "invoice_date": iso_date(self.invoice_date),
                "due_date": iso_date(self.due_date),
                "currency": self.currency or DEFAULT_CURRENCY,
                "exchange_rate": self.exchange_rate or DEFAULT_EXCHANGE_RATE,
                "notes": self.notes,
                "attachment_url": self.attachment_url,
            }
        )
        # Unnumbered lines get their position
        payload["lines"] = [
            {**line.to_payload(), "line_number": line.line_number or index}
            for index, line in enumerate(self.lines, start=1)
        ]
        return payload


@dataclass
class PaymentAllocationInput:
    invoice_id: str
    amount: float

    def to_payload(self) -> dict[str, Any]:
        return {"invoice_id": self.invoice_id, "amount": self.amount}


@dataclass
class CreatePaymentDto:
    payment_type: str
    party_id: str
    party_type: str
    payment_date: DateLike
    amount: float
    payment_method: PaymentMethod | str = PaymentMethod.CASH
    currency: str | None = None
    exchange_rate: float | None = None
    bank_account_id: str | None = None
    reference_number: str | None = None
    check_number: str | None = None
    check_date: DateLike | None = None
    bank_name: str | None = None
    notes: str | None = None
    allocations: list[PaymentAllocationInput] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        payload = compact(
            {
                "payment_type": self.payment_type,
                "party_id": self.party_id,
                "party_type": self.party_type,
                "payment_date": iso_date(self.payment_date),
                "currency": self.currency or DEFAULT_CURRENCY,
                "exchange_rate": self.exchange_rate or DEFAULT_EXCHANGE_RATE,
                "payment_method": self.payment_method,
                "amount": self.amount,
                "bank_account_id": self.bank_account_id,
                "reference_number": self.reference_number,
                "check_number": self.check_number,
                "check_date": iso_date(self.check_date),
                "bank_name": self.bank_name,
                "notes": self.notes,
            }
        )
        if self.allocations:
            payload["allocations"] = [a.to_payload() for a in self.allocations]
        return payload


@dataclass
class DocumentItemInput:
    """Line item on a quotation or purchase order."""

    description: str
    quantity: float
    unit_price: float
    discount: float = 0.0
    tax_rate: float = 0.0
    description_ar: str | None = None
    description_en: str | None = None
    product_id: str | None = None
    id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return compact(
            {
                "id": self.id,
                "product_id": self.product_id,
                "description": self.description,
                "description_ar": self.description_ar,
                "description_en": self.description_en,
                "quantity": self.quantity,
                "unit_price": self.unit_price,
                "discount": self.discount,
                "tax_rate": self.tax_rate,
            }
        )


@dataclass
class CreateQuotationDto:
    customer_id: str
    date: DateLike
    valid_until: DateLike
    items: list[DocumentItemInput]
    notes: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = compact(
            {
                "customer_id": self.customer_id,
                "date": iso_date(self.date),
                "valid_until": iso_date(self.valid_until),
                "notes": self.notes,
            }
        )
        payload["items"] = [item.to_payload() for item in self.items]
        return payload


@dataclass
class CreatePurchaseOrderDto:
    vendor_id: str
    date: DateLike
    items: list[DocumentItemInput]
    expected_delivery_date: DateLike | None = None
    notes: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = compact(
            {
                "vendor_id": self.vendor_id,
                "date": iso_date(self.date),
                "expected_delivery_date": iso_date(self.expected_delivery_date),
                "notes": self.notes,
            }
        )
        payload["items"] = [item.to_payload() for item in self.items]
        return payload


@dataclass
class CreateExpenseDto:
    date: DateLike
    category: ExpenseCategory | str
    description: str
    amount: float
    vendor_name: str | None = None
    vendor_id: str | None = None
    currency: str | None = None
    notes: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return compact(
            {
                "date": iso_date(self.date),
                "category": self.category,
                "description": self.description,
                "vendor_name": self.vendor_name,
                "vendor_id": self.vendor_id,
                "amount": self.amount,
                "currency": self.currency or DEFAULT_CURRENCY,
                "notes": self.notes,
            }
        )


@dataclass
class CreateReconciliationDto:
    account_id: str
    start_date: DateLike
    end_date: DateLike
    statement_balance: float

    def to_payload(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "start_date": iso_date(self.start_date),
            "end_date": iso_date(self.end_date),
            "statement_balance": self.statement_balance,
        }


@dataclass
class CreateVatRateDto:
    code: str
    name: str
    rate: float
    type: VatRateType
    effective_date: DateLike
    is_default: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "rate": self.rate,
            "type": VatRateType(self.type).value,
            "effective_date": iso_date(self.effective_date),
            "is_default": self.is_default,
        }


@dataclass
class CreateFiscalYearDto:
    name: str
    year: int
    start_date: DateLike
    end_date: DateLike
    is_locked: bool = False
    description: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "year": self.year,
            "start_date": iso_date(self.start_date),
            "end_date": iso_date(self.end_date),
            "is_locked": self.is_locked,
        }
        if self.description:
            payload["description"] = self.description
        return payload


@dataclass
class CreateCostCenterDto:
    """A cost center carries its name in both languages."""

    code: str
    name_en: str
    name_ar: str
    description: str | None = None
    description_ar: str | None = None
    parent_id: str | None = None
    is_active: bool = True

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "name_en": self.name_en,
            "name_ar": self.name_ar,
            "is_active": self.is_active,
        }
        for key in ("description", "description_ar", "parent_id"):
            value = getattr(self, key)
            if value:
                payload[key] = value
        return payload
