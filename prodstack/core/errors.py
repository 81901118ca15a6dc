"""Error taxonomy for document generation.

Client-side failures are raised as ``GenerationError`` subclasses; each one
carries the message the user sees. Server-side failures are raised as
``ApiError`` and rendered as the JSON error body by the API layer.
"""

from typing import Any

# Message of a RateLimitError; the retry controller keys on the class, callers
# that only see strings key on this value.
RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"

TOO_MANY_REQUESTS_MESSAGE = "Too many requests. Please try again in a moment."
PAYMENT_REQUIRED_MESSAGE = "AI usage limit reached. Please check your workspace credits."
AUTH_REQUIRED_MESSAGE = "Authentication Required: Please sign in to generate documents"
NO_CONTENT_MESSAGE = "No content received from AI service"
STREAM_FAILED_MESSAGE = "Failed to process streaming response"
DEFAULT_FAILURE_MESSAGE = "Failed to generate document"
NOT_FOUND_MESSAGE = "Requested data not found. Please refresh and try again."
AUTH_FAILED_MESSAGE = "Authentication failed. Please sign in again."
INVALID_DATA_MESSAGE = "Invalid request data"
SERVICE_UNAVAILABLE_MESSAGE = "AI service temporarily unavailable. Please try again later."


class GenerationError(Exception):
    """Base class for client-visible generation failures."""

    def __init__(self, message: str, user_message: str | None = None, details: str | None = None):
        super().__init__(message)
        self.user_message = user_message or message
        self.details = details


class DocumentValidationError(GenerationError):
    """Selection is incomplete or references unknown entities. Never retried."""


class AuthenticationError(GenerationError):
    """Missing or rejected credential."""


class AuthorizationError(GenerationError):
    """Workspace not owned by the caller (reported as not-found)."""


class NotFoundError(GenerationError):
    """Referenced data does not exist."""


class RateLimitError(GenerationError):
    """Upstream asked us to slow down. Transient, retried by the controller."""

    def __init__(self, details: str | None = None):
        super().__init__(RATE_LIMIT_ERROR, user_message=TOO_MANY_REQUESTS_MESSAGE, details=details)


class RateLimitExhaustedError(GenerationError):
    """Rate limited on every attempt, including all retries."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Rate limited after {attempts} attempts",
            user_message=TOO_MANY_REQUESTS_MESSAGE,
        )
        self.attempts = attempts


class UpstreamUnavailableError(GenerationError):
    """AI service down, unconfigured or out of quota. Not retried."""


class PaymentRequiredError(UpstreamUnavailableError):
    """AI usage quota for the workspace is exhausted."""

    def __init__(self, details: str | None = None):
        super().__init__(PAYMENT_REQUIRED_MESSAGE, details=details)


class StreamIntegrityError(GenerationError):
    """Stream broke or delivered no content."""


class ApiError(Exception):
    """Server-side failure rendered as ``{error, code?, details?}``."""

    def __init__(
        self,
        status_code: int,
        error: str,
        code: str | None = None,
        details: str | None = None,
    ):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.code = code
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.code:
            body["code"] = self.code
        if self.details:
            body["details"] = self.details
        return body
