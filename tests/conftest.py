"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable

import httpx
import pytest

# Set test environment variables before importing settings
os.environ.setdefault("QAYD_EMAIL", "test@example.com")
os.environ.setdefault("QAYD_PASSWORD", "Testpass1!")

BASE_URL = "http://qayd.test/api"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_client():
    """Build a QaydAPIClient whose HTTP traffic goes to a handler function."""
    from qayd.api.client import QaydAPIClient

    def factory(handler, access_token="access-token-123", refresh_token="refresh-token-123"):
        transport = RecordingTransport(handler)
        client = QaydAPIClient(
            base_url=BASE_URL,
            email="test@example.com",
            password="Testpass1!",
            access_token=access_token,
            refresh_token=refresh_token,
            max_retries=2,
            transport=transport,
        )
        return client, transport

    return factory


@pytest.fixture
def mock_login_response():
    """Mock successful sign-in response."""
    return {
        "user": {
            "id": "11111111-1111-1111-1111-111111111111",
            "email": "test@example.com",
            "tenant_id": "22222222-2222-2222-2222-222222222222",
            "role": "admin",
        },
        "session": {
            "access_token": "access-token-123",
            "refresh_token": "refresh-token-123",
            "expires_in": 3600,
        },
    }


@pytest.fixture
def mock_journal_response():
    """Mock draft journal response."""
    return {
        "id": "33333333-3333-3333-3333-333333333333",
        "journal_number": "JV-0001",
        "transaction_date": "2024-01-15",
        "description_en": "Office rent",
        "description_ar": "إيجار المكتب",
        "journal_type": "general",
        "status": "draft",
        "total_debit": 5000,
        "total_credit": 5000,
        "currency": "QAR",
        "lines": [
            {"account_id": "acc-rent", "debit_amount": 5000, "credit_amount": 0},
            {"account_id": "acc-bank", "debit_amount": 0, "credit_amount": 5000},
        ],
    }


@pytest.fixture
def mock_customers_response():
    """Mock customers list response."""
    return [
        {
            "id": "44444444-4444-4444-4444-444444444444",
            "code": "C-001",
            "name_en": "Doha Trading",
            "name_ar": "الدوحة للتجارة",
            "email": "info@dohatrading.qa",
            "is_active": True,
        },
        {
            "id": "55555555-5555-5555-5555-555555555555",
            "code": "C-002",
            "name_en": "Pearl Services",
            "name_ar": "خدمات اللؤلؤة",
            "email": "hello@pearl.qa",
            "is_active": True,
        },
    ]
