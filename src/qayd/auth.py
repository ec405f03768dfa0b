"""Signed-in user, tenant and session state on top of the API client."""

from typing import Any

import structlog

from qayd.api.client import QaydAPIClient
from qayd.errors import AuthenticationError, FormValidationError
from qayd.security import validate_password

logger = structlog.get_logger(__name__)


class AuthContext:
    """Tracks who is signed in and keeps it in step with the client's tokens."""

    def __init__(self, client: QaydAPIClient):
        self.client = client
        self.user: dict[str, Any] | None = None
        self.tenant: dict[str, Any] | None = None
        self.session: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.client.is_authenticated

    @property
    def tenant_id(self) -> str | None:
        if self.tenant and self.tenant.get("id"):
            return self.tenant["id"]
        return (self.user or {}).get("tenant_id")

    def _apply(self, data: dict[str, Any]) -> None:
        self.user = data.get("user") or self.user
        self.tenant = data.get("tenant") or self.tenant
        self.session = data.get("session") or self.session

    def _clear(self) -> None:
        self.user = None
        self.tenant = None
        self.session = None

    async def sign_in(self, email: str | None = None, password: str | None = None) -> dict[str, Any]:
        data = await self.client.sign_in(email, password)
        self._apply(data)
        return data

    async def sign_up(self, email: str, password: str, tenant_id: str) -> dict[str, Any]:
        """Register in an existing tenant; weak passwords are refused locally."""
        strength = validate_password(password)
        if not strength.is_valid:
            raise FormValidationError(strength.errors)
        data = await self.client.sign_up(email, password, tenant_id)
        self._apply(data)
        return data

    async def create_tenant(
        self, name: str, name_ar: str, email: str, password: str
    ) -> dict[str, Any]:
        """Create a company with its first admin and sign in as that admin."""
        strength = validate_password(password)
        if not strength.is_valid:
            raise FormValidationError(strength.errors)
        data = await self.client.create_tenant_with_admin(name, name_ar, email, password)
        self._apply(data)
        return data

    async def sign_out(self) -> None:
        try:
            await self.client.sign_out()
        finally:
            self._clear()

    async def refresh(self) -> dict[str, Any] | None:
        """Reload the current user from the server.

        Returns None when there is no session. An expired session clears
        local state before the error propagates.
        """
        if not self.client.is_authenticated:
            self._clear()
            return None
        try:
            data = await self.client.verify_session()
        except AuthenticationError:
            logger.info("session_invalid")
            self._clear()
            raise
        self.user = data.get("user") or data
        if data.get("tenant"):
            self.tenant = data["tenant"]
        return self.user

    def require_user(self) -> dict[str, Any]:
        if not self.is_authenticated or self.user is None:
            raise AuthenticationError("Not signed in", status_code=401)
        return self.user
