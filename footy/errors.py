# footy/errors.py
"""
Error taxonomy for the subscription store and the news gateway.

Every error carries the HTTP status the API layer answers with and the
message shown to the user; the feeds layer turns the same message into an
error banner.
"""
from __future__ import annotations
from typing import Optional


class FootyError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.public_message)

    @property
    def user_message(self) -> str:
        return self.public_message


# --- store ---

class InvalidCategory(FootyError, ValueError):
    status_code = 400
    public_message = "Invalid category"

    def __init__(self, category: str) -> None:
        self.category = category
        super().__init__(f"Invalid category: {category!r}")


class PersistenceError(FootyError):
    public_message = "Failed to save subscriptions"


# --- gateway ---

class InvalidQuery(FootyError, ValueError):
    status_code = 400
    public_message = "Please provide a valid query"


class GatewayError(FootyError):
    """Base for failures talking to the upstream chat-completion API."""
    public_message = "Failed to fetch news from xAI"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class AuthError(GatewayError):
    status_code = 401
    public_message = "Invalid or missing xAI API key"


class ForbiddenError(GatewayError):
    status_code = 403
    public_message = "Access forbidden to xAI API"


class RateLimitedError(GatewayError):
    status_code = 429
    public_message = "Rate limit exceeded for xAI API"


class UpstreamError(GatewayError):
    """Non-2xx reply (other than 401/403/429) or an unusable body."""

    @property
    def user_message(self) -> str:
        return str(self)


class RedirectError(UpstreamError):
    """3xx reply; redirects are not followed."""
    public_message = "xAI API redirected the request"


class TransportError(GatewayError):
    """No response was received (connect error, timeout, protocol error)."""


class NoResultsError(GatewayError):
    """The upstream call succeeded but no news lines could be parsed."""


class SummaryUnavailableError(GatewayError):
    public_message = "Failed to fetch the summary"


_STATUS_ERRORS = {
    401: AuthError,
    403: ForbiddenError,
    429: RateLimitedError,
}


def error_for_status(status: int, upstream_message: Optional[str] = None) -> GatewayError:
    """Map an upstream HTTP status to the matching gateway error."""
    cls = _STATUS_ERRORS.get(status)
    if cls is not None:
        return cls()
    if 300 <= status < 400:
        return RedirectError(upstream_message or RedirectError.public_message, status_code=status)
    return UpstreamError(upstream_message or UpstreamError.public_message, status_code=status)
