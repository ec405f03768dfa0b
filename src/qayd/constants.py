"""Shared constants for the Qayd client."""

# Numeric tolerances (amounts are floats in the API)
JOURNAL_BALANCE_TOLERANCE = 0.01
PAYMENT_OVER_ALLOCATION_TOLERANCE = 0.01

MAX_SEARCH_LENGTH = 100

MIN_JOURNAL_LINES = 2

# Retry policy for transport failures
RETRY_BASE_DELAY = 1.0
RETRY_MAX_DELAY = 30.0
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "PUT", "DELETE"})
DEFAULT_RETRY_AFTER = 60

# Tables
DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_OPTIONS = (5, 10, 20, 50, 100)

# Passwords
PASSWORD_MIN_LENGTH = 8

# Money
DEFAULT_CURRENCY = "QAR"
DEFAULT_EXCHANGE_RATE = 1.0

CURRENCY_SYMBOLS = {
    "QAR": "QAR",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "AED": "AED",
}

# Locales
DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("en", "ar")
RTL_LOCALES = frozenset({"ar"})

DEFAULT_REDIRECT = "/dashboard"
SESSION_EXPIRED_MESSAGE = "Session expired. Please sign in again."
