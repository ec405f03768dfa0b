"""Error types raised by the Qayd client."""

from typing import Any

DEFAULT_ERROR_MESSAGE = "An error occurred"


class QaydError(Exception):
    """Base exception for all Qayd client errors."""

    pass


class QaydAPIError(QaydError):
    """Error returned by (or while talking to) the Qayd API."""

    default_code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
        code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "details": self.details,
        }


class AuthenticationError(QaydAPIError):
    """Authentication failed."""

    default_code = "AUTH_ERROR"


class SessionExpiredError(AuthenticationError):
    """The refresh token was rejected; the user must sign in again."""

    default_code = "SESSION_EXPIRED"


class PermissionDeniedError(QaydAPIError):
    """The signed-in user may not perform this operation."""

    default_code = "PERMISSION_ERROR"


class NotFoundError(QaydAPIError):
    """Requested record does not exist."""

    default_code = "NOT_FOUND"


class ValidationError(QaydAPIError):
    """The server rejected the request payload."""

    default_code = "VALIDATION_ERROR"


class RateLimitError(QaydAPIError):
    """Rate limit exceeded."""

    default_code = "RATE_LIMITED"


class NetworkError(QaydAPIError):
    """Server unavailable or the request never completed."""

    default_code = "NETWORK_ERROR"


class FormValidationError(QaydError, ValueError):
    """Client-side validation failed before any request was sent."""

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ActionNotAvailableError(QaydError):
    """A workflow action is not offered for the record's current status."""

    def __init__(self, entity: str, action: str, status: str | None, message: str):
        super().__init__(message)
        self.entity = entity
        self.action = action
        self.status = status


def _message_from_payload(payload: Any, reason: str | None) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, list):
                value = "; ".join(str(v) for v in value)
            if value:
                return str(value)
    return reason or DEFAULT_ERROR_MESSAGE


def error_from_response(
    status_code: int, payload: Any = None, reason: str | None = None
) -> QaydAPIError:
    """Build the matching error for a failed HTTP response."""
    message = _message_from_payload(payload, reason)
    error_cls: type[QaydAPIError]
    if status_code == 401:
        error_cls = AuthenticationError
    elif status_code == 403:
        error_cls = PermissionDeniedError
    elif status_code == 404:
        error_cls = NotFoundError
    elif status_code in (400, 422):
        error_cls = ValidationError
    elif status_code == 429:
        error_cls = RateLimitError
    elif status_code >= 500:
        error_cls = NetworkError
    else:
        error_cls = QaydAPIError
    return error_cls(message, status_code=status_code, details=payload)


def handle_error(exc: BaseException) -> QaydError:
    """Normalize any exception into a QaydError.

    Unknown exceptions are classified by message: timeouts and network
    failures become NetworkError, auth failures AuthenticationError.
    """
    if isinstance(exc, QaydError):
        return exc

    message = str(exc) or DEFAULT_ERROR_MESSAGE
    lowered = message.lower()
    if "timeout" in lowered or "network" in lowered:
        return NetworkError(message, status_code=503)
    if "auth" in lowered or "unauthorized" in lowered:
        return AuthenticationError(message, status_code=401)
    return QaydAPIError(message, status_code=500, code="UNKNOWN_ERROR")
