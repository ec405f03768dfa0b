"""Qayd API client with bearer authentication and single-flight token refresh."""

import asyncio
import math
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx
import structlog

from qayd.api.accounts import AccountsAPI
from qayd.api.assets import AssetsAPI
from qayd.api.banking import BankingAPI
from qayd.api.base import clean_params, extract_record
from qayd.api.company_settings import CompanySettingsAPI
from qayd.api.cost_centers import CostCentersAPI
from qayd.api.dashboard import DashboardAPI
from qayd.api.expenses import ExpensesAPI
from qayd.api.fiscal_years import FiscalYearsAPI
from qayd.api.general_ledger import GeneralLedgerAPI
from qayd.api.invoices import InvoicesAPI
from qayd.api.journals import JournalsAPI
from qayd.api.parties import CustomersAPI, VendorsAPI
from qayd.api.payments import PaymentsAPI
from qayd.api.purchase_orders import PurchaseOrdersAPI
from qayd.api.quotations import QuotationsAPI
from qayd.api.reconciliations import ReconciliationsAPI
from qayd.api.reports import ReportsAPI
from qayd.api.vat import VatRatesAPI, VatReturnsAPI
from qayd.config import get_settings
from qayd.constants import (
    DEFAULT_RETRY_AFTER,
    IDEMPOTENT_METHODS,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
    SESSION_EXPIRED_MESSAGE,
)
from qayd.errors import (
    AuthenticationError,
    NetworkError,
    QaydAPIError,
    RateLimitError,
    SessionExpiredError,
    error_from_response,
)
from qayd.exports import ExportedFile, Exporter, filename_from_disposition

logger = structlog.get_logger(__name__)


def parse_retry_after(value: str | None) -> int:
    """Seconds to wait from a Retry-After header, either delta-seconds or an HTTP-date."""
    if not value:
        return DEFAULT_RETRY_AFTER
    try:
        return max(0, int(value))
    except ValueError:
        pass
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max(0, math.ceil((retry_at - datetime.now(timezone.utc)).total_seconds()))


class QaydAPIClient:
    """Async client for the Qayd REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        email: str | None = None,
        password: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self._email = email or settings.email
        self._password = password or (
            settings.password.get_secret_value() if settings.password else None
        )
        self._timeout = timeout if timeout is not None else settings.timeout
        self._max_retries = max_retries if max_retries is not None else settings.max_retries
        self._transport = transport

        self._access_token: str | None = access_token
        self._refresh_token: str | None = refresh_token

        self._client: httpx.AsyncClient | None = None
        self._refresh_lock = asyncio.Lock()

        self.journals = JournalsAPI(self)
        self.invoices = InvoicesAPI(self)
        self.payments = PaymentsAPI(self)
        self.quotations = QuotationsAPI(self)
        self.purchase_orders = PurchaseOrdersAPI(self)
        self.expenses = ExpensesAPI(self)
        self.customers = CustomersAPI(self)
        self.vendors = VendorsAPI(self)
        self.assets = AssetsAPI(self)
        self.banking = BankingAPI(self)
        self.reconciliations = ReconciliationsAPI(self)
        self.company_settings = CompanySettingsAPI(self)
        self.accounts = AccountsAPI(self)
        self.reports = ReportsAPI(self)
        self.general_ledger = GeneralLedgerAPI(self)
        self.vat_rates = VatRatesAPI(self)
        self.vat_returns = VatReturnsAPI(self)
        self.fiscal_years = FiscalYearsAPI(self)
        self.cost_centers = CostCentersAPI(self)
        self.dashboard = DashboardAPI(self)
        self.exports = Exporter(self)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "QaydAPIClient":
        if not self._access_token and self._email and self._password:
            await self.sign_in()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # === Tokens ===

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def set_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        self._access_token = access_token
        if refresh_token is not None:
            self._refresh_token = refresh_token

    def clear_tokens(self) -> None:
        self._access_token = None
        self._refresh_token = None

    def _get_headers(self) -> dict[str, str]:
        """Get request headers with auth token."""
        headers = {"Accept": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    def _store_session(self, data: dict[str, Any]) -> None:
        session = data.get("session") or {}
        access_token = session.get("access_token")
        if access_token:
            self.set_tokens(access_token, session.get("refresh_token"))

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"raw": response.text[:500]}

    # === Authentication ===

    async def _post_public(self, path: str, json: dict[str, Any]) -> httpx.Response:
        """POST without bearer auth or refresh handling."""
        client = await self._get_client()
        try:
            return await client.post(path, json=json, headers={"Accept": "application/json"})
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}", status_code=503) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code >= 400:
            raise error_from_response(
                response.status_code, self._decode(response), response.reason_phrase
            )

    async def sign_in(
        self, email: str | None = None, password: str | None = None
    ) -> dict[str, Any]:
        """Sign in and store the session tokens."""
        email = email or self._email
        password = password or self._password
        if not email or not password:
            raise AuthenticationError("Email and password are required", status_code=401)

        response = await self._post_public(
            "/auth/sign-in", json={"email": email, "password": password}
        )
        if response.status_code == 401:
            raise AuthenticationError("Invalid credentials", status_code=401)
        self._raise_for_status(response)

        data = extract_record(self._decode(response))
        if not (data.get("session") or {}).get("access_token"):
            raise AuthenticationError("Invalid sign-in response format", details=data)
        self._store_session(data)
        self._email = email

        logger.info("signed_in", user=(data.get("user") or {}).get("email", email))
        return data

    async def sign_up(self, email: str, password: str, tenant_id: str) -> dict[str, Any]:
        """Register a user in an existing tenant."""
        response = await self._post_public(
            "/auth/sign-up",
            json={"email": email, "password": password, "tenantId": tenant_id},
        )
        self._raise_for_status(response)
        data = extract_record(self._decode(response))
        self._store_session(data)
        logger.info("signed_up", user=email, tenant_id=tenant_id)
        return data

    async def create_tenant_with_admin(
        self, name: str, name_ar: str, email: str, password: str
    ) -> dict[str, Any]:
        """Create a tenant and its first admin user, then sign in as that user."""
        response = await self._post_public(
            "/tenants/create-with-admin",
            json={"name": name, "nameAr": name_ar, "email": email, "password": password},
        )
        self._raise_for_status(response)
        data = extract_record(self._decode(response))
        self._store_session(data)
        logger.info("tenant_created", tenant=name, admin=email)
        return data

    async def sign_out(self) -> None:
        """Sign out on the server; local tokens are cleared regardless."""
        try:
            if self._access_token:
                await self.post("/auth/sign-out")
        except QaydAPIError as e:
            logger.warning("sign_out_failed", error=str(e), status=e.status_code)
        finally:
            self.clear_tokens()
        logger.info("signed_out")

    async def reset_password(self, email: str) -> dict[str, Any]:
        """Request a password reset email."""
        response = await self._post_public("/auth/reset-password", json={"email": email})
        self._raise_for_status(response)
        return extract_record(self._decode(response))

    async def verify_session(self) -> dict[str, Any]:
        """Return the current user if the access token is still valid."""
        return extract_record(await self.post("/auth/verify"))

    async def refresh_tokens(self, stale_token: str | None = None) -> None:
        """Exchange the refresh token for a new session.

        Concurrent callers share a single refresh: a caller that passes the
        token its request was sent with returns immediately if another
        caller has already replaced it.
        """
        async with self._refresh_lock:
            if stale_token is not None and self._access_token != stale_token:
                logger.debug("tokens_already_refreshed")
                return
            if not self._refresh_token:
                raise AuthenticationError("No refresh token available", status_code=401)

            client = await self._get_client()
            try:
                response = await client.post(
                    "/auth/refresh-token",
                    json={"refreshToken": self._refresh_token},
                    headers={"Accept": "application/json"},
                )
            except httpx.RequestError as e:
                self.clear_tokens()
                raise SessionExpiredError(SESSION_EXPIRED_MESSAGE, status_code=401) from e

            data = extract_record(self._decode(response)) if response.status_code < 400 else {}
            session = data.get("session") or {}
            if not session.get("access_token"):
                logger.warning("token_refresh_failed", status=response.status_code)
                self.clear_tokens()
                raise SessionExpiredError(SESSION_EXPIRED_MESSAGE, status_code=401)

            self.set_tokens(session["access_token"], session.get("refresh_token"))
            logger.debug("tokens_refreshed")

    # === Generic Request Methods ===

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: dict[str, Any] | None = None,
        retry_count: int = 0,
        refreshed: bool = False,
    ) -> httpx.Response:
        """Send an authenticated request, refreshing once on 401."""
        client = await self._get_client()
        token_used = self._access_token

        try:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=json,
                files=files,
                headers=self._get_headers(),
            )
        except httpx.RequestError as e:
            # Only idempotent requests are safe to resend
            if method.upper() in IDEMPOTENT_METHODS and retry_count < self._max_retries:
                delay = min(RETRY_BASE_DELAY * 2**retry_count, RETRY_MAX_DELAY)
                logger.warning(
                    "request_retry", method=method, path=path, attempt=retry_count + 1, delay=delay
                )
                await asyncio.sleep(delay)
                return await self._send(
                    method, path, params, json, files, retry_count + 1, refreshed
                )
            raise NetworkError(f"Request failed: {e}", status_code=503) from e

        if response.status_code == 401 and not refreshed and self._refresh_token:
            await self.refresh_tokens(stale_token=token_used)
            return await self._send(method, path, params, json, files, retry_count, True)

        if response.status_code == 429:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            raise RateLimitError(
                f"Rate limited, retry after {retry_after}s",
                status_code=429,
                details={"retry_after": retry_after},
            )

        self._raise_for_status(response)
        return response

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Make an authenticated JSON request."""
        response = await self._send(method, path, params=params, json=json)
        return self._decode(response)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make GET request."""
        return await self._request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make POST request."""
        return await self._request("POST", path, params=params, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        """Make PUT request."""
        return await self._request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        """Make PATCH request."""
        return await self._request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        """Make DELETE request."""
        return await self._request("DELETE", path)

    # === Files ===

    async def download(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        filename: str | None = None,
    ) -> ExportedFile:
        """Download a file.

        The name is taken from `filename`, then the Content-Disposition
        header, then `download_<unix-ms>`.
        """
        response = await self._send("GET", path, params=clean_params(params))
        name = (
            filename
            or filename_from_disposition(response.headers.get("Content-Disposition"))
            or f"download_{int(time.time() * 1000)}"
        )
        logger.debug("downloaded", path=path, filename=name, bytes=len(response.content))
        return ExportedFile(
            filename=name,
            content=response.content,
            content_type=response.headers.get("Content-Type"),
        )

    async def upload(
        self,
        path: str,
        field: str,
        filename: str,
        content: bytes,
        content_type: str | None = None,
        method: str = "POST",
    ) -> dict[str, Any]:
        """Upload a single file as multipart form data."""
        files = {field: (filename, content, content_type or "application/octet-stream")}
        response = await self._send(method, path, files=files)
        logger.info("uploaded", path=path, filename=filename, bytes=len(content))
        return extract_record(self._decode(response))
