"""REST API client and resource modules."""

from qayd.api.base import extract_items, extract_record
from qayd.api.client import QaydAPIClient

__all__ = ["QaydAPIClient", "extract_items", "extract_record"]
