"""Security helpers: redirect whitelisting, password strength, escaping."""

from __future__ import annotations

import re
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal
from urllib.parse import urljoin, urlsplit

from qayd.constants import DEFAULT_REDIRECT, PASSWORD_MIN_LENGTH, SUPPORTED_LOCALES

APP_ORIGIN = "http://localhost"

ALLOWED_REDIRECT_PATHS = frozenset(
    {
        # Authentication pages
        "/signin",
        "/signup",
        "/auth/signin",
        "/auth/signup",
        "/auth/forgot-password",
        "/auth/reset-password",
        # Application modules
        "/dashboard",
        "/accounting",
        "/banking",
        "/sales",
        "/purchases",
        "/assets",
        "/reports",
        "/tax",
        "/settings",
        # Account settings
        "/settings/profile",
        "/settings/company",
        "/settings/users",
        "/settings/roles",
        "/settings/cost-centers",
        "/settings/fiscal",
    }
)

BLOCKED_URL_SCHEMES = frozenset({"javascript", "data", "vbscript", "file"})

_SPECIAL_CHARACTER = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")
_BOT_PATTERN = re.compile(r"bot|crawler|spider|scraper|curl|wget|python|java|perl|ruby", re.I)
_STRIPPED_CHARS = re.compile(r"[\t\n\r]")
_ENCODED_DOT = re.compile(r"%2e", re.I)


def _resolve_dot_segments(path: str) -> str:
    """Resolve `.` and `..` segments, including percent-encoded ones."""
    segments: list[str] = []
    for segment in path.split("/")[1:]:
        decoded = _ENCODED_DOT.sub(".", segment)
        if decoded == "..":
            if segments:
                segments.pop()
        elif decoded != ".":
            segments.append(segment)
    return "/" + "/".join(segments)


def _is_whitelisted(pathname: str) -> bool:
    if pathname in ALLOWED_REDIRECT_PATHS:
        return True
    return any(pathname.startswith(allowed + "/") for allowed in ALLOWED_REDIRECT_PATHS)


def is_valid_redirect(url: str) -> bool:
    """True if url stays on the app origin and targets a whitelisted page.

    Paths may carry a leading locale segment (`/ar/dashboard`). Relative
    paths are resolved against the app origin first, so protocol-relative
    (`//evil.com`) and backslash (`/\\evil.com`) tricks resolve off-origin
    and are rejected.
    """
    if not isinstance(url, str):
        return False
    candidate = _STRIPPED_CHARS.sub("", url).strip().replace("\\", "/")
    try:
        parsed = urlsplit(urljoin(APP_ORIGIN + "/", candidate))
        port = parsed.port
    except ValueError:
        return False

    if parsed.scheme != "http" or parsed.hostname != "localhost" or port not in (None, 80):
        return False
    if parsed.username or parsed.password:
        return False

    pathname = _resolve_dot_segments(parsed.path)
    if pathname.endswith("/"):
        pathname = pathname[:-1]
    pathname = pathname or "/"

    if _is_whitelisted(pathname):
        return True

    segments = [segment for segment in pathname.split("/") if segment]
    if len(segments) > 1 and segments[0] in SUPPORTED_LOCALES:
        return _is_whitelisted("/" + "/".join(segments[1:]))
    return False


def sanitize_redirect(url: str | None, default: str = DEFAULT_REDIRECT) -> str:
    """Return url if it is a safe redirect target, otherwise default."""
    if url and is_valid_redirect(url):
        return url
    return default


Strength = Literal["weak", "medium", "strong"]


@dataclass(frozen=True)
class PasswordStrength:
    is_valid: bool
    strength: Strength
    errors: list[str] = field(default_factory=list)


def validate_password(password: str) -> PasswordStrength:
    """Score a password against five criteria.

    Length, lowercase, uppercase, digit and special character each count
    once: two or fewer met is weak, three or four medium, all five strong.
    """
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    if not _SPECIAL_CHARACTER.search(password):
        errors.append("Password must contain at least one special character")

    criteria_met = 5 - len(errors)
    strength: Strength
    if criteria_met <= 2:
        strength = "weak"
    elif criteria_met <= 4:
        strength = "medium"
    else:
        strength = "strong"

    return PasswordStrength(is_valid=not errors, strength=strength, errors=errors)


def escape_html(unsafe: str) -> str:
    return (
        unsafe.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def is_valid_url(url: str) -> bool:
    """Allow http(s) and relative URLs; block script and file schemes."""
    candidate = _STRIPPED_CHARS.sub("", url or "").strip()
    try:
        parsed = urlsplit(urljoin(APP_ORIGIN + "/", candidate))
    except ValueError:
        return False
    scheme = parsed.scheme.lower()
    if scheme in BLOCKED_URL_SCHEMES:
        return False
    return scheme in ("http", "https")


def generate_csrf_token(length: int = 32) -> str:
    """Random token of `length` bytes, hex encoded."""
    return secrets.token_hex(length)


def is_bot(user_agent: str | None) -> bool:
    return bool(user_agent and _BOT_PATTERN.search(user_agent))


class RateLimiter:
    """Fixed-window request counter keyed by an identifier."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[int, float]] = {}

    def is_limited(
        self,
        identifier: str,
        max_requests: int | None = None,
        window_seconds: float | None = None,
    ) -> bool:
        """Count a request and report whether the identifier is over its limit."""
        limit = max_requests if max_requests is not None else self.max_requests
        window = window_seconds if window_seconds is not None else self.window_seconds
        now = self._clock()

        count, reset_at = self._windows.get(identifier, (0, 0.0))
        if count == 0 or now > reset_at:
            self._windows[identifier] = (1, now + window)
            return False
        if count >= limit:
            return True
        self._windows[identifier] = (count + 1, reset_at)
        return False

    def clear(self, identifier: str) -> None:
        self._windows.pop(identifier, None)


_default_limiter = RateLimiter()


def is_rate_limited(
    identifier: str, max_requests: int = 100, window_seconds: float = 60.0
) -> bool:
    return _default_limiter.is_limited(identifier, max_requests, window_seconds)


def clear_rate_limit(identifier: str) -> None:
    _default_limiter.clear(identifier)
