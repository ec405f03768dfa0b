"""Qayd - async client, workflow rules and CLI for the Qayd accounting API."""

__version__ = "0.1.0"

from qayd.api import QaydAPIClient, extract_items, extract_record
from qayd.auth import AuthContext
from qayd.calculations import (
    calculate_invoice_totals,
    calculate_line_item,
    format_currency,
    validate_payment_allocations,
)
from qayd.config import configure_logging, get_settings
from qayd.errors import (
    ActionNotAvailableError,
    AuthenticationError,
    FormValidationError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    QaydAPIError,
    QaydError,
    RateLimitError,
    SessionExpiredError,
    ValidationError,
)
from qayd.exports import ExportedFile, ExportFormat, Exporter
from qayd.journal_entry import JournalDraft, JournalLineDraft, journal_totals
from qayd.search import Favorites, RecentItems, search_navigation
from qayd.security import is_valid_redirect, sanitize_redirect, validate_password
from qayd.workflow import Action, ActionResult, ActionRunner, Entity, available_actions

__all__ = [
    # Version
    "__version__",
    # API
    "QaydAPIClient",
    "extract_items",
    "extract_record",
    "AuthContext",
    # Errors
    "QaydError",
    "QaydAPIError",
    "AuthenticationError",
    "SessionExpiredError",
    "PermissionDeniedError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "NetworkError",
    "FormValidationError",
    "ActionNotAvailableError",
    # Calculations
    "calculate_line_item",
    "calculate_invoice_totals",
    "validate_payment_allocations",
    "format_currency",
    "JournalDraft",
    "JournalLineDraft",
    "journal_totals",
    # Workflow
    "Entity",
    "Action",
    "ActionResult",
    "ActionRunner",
    "available_actions",
    # Exports
    "ExportFormat",
    "ExportedFile",
    "Exporter",
    # Navigation & security
    "search_navigation",
    "RecentItems",
    "Favorites",
    "is_valid_redirect",
    "sanitize_redirect",
    "validate_password",
    # Config
    "get_settings",
    "configure_logging",
]
