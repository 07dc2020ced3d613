"""Typed exception hierarchy for Bitbucket-related errors.

This module defines all custom exceptions used by the Bitbucket client library.
All exceptions inherit from the BitbucketError base class for easy catching.
HTTP status failures share the HttpError base so callers can branch on the
status family while still getting the status code, URL and server message.
"""

from typing import List, NamedTuple, Optional


class BitbucketError(Exception):
    """Base exception for all bitbucket-rest-client errors.

    Use this to catch any application-level error from the client.
    """
    pass


class TransportError(BitbucketError):
    """Raised when the server cannot be reached (connection refused, timeout)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Bitbucket is not reachable at {url}: {reason}")
        self.url = url
        self.reason = reason


class ResponseParseError(BitbucketError):
    """Raised when a response body is not the JSON shape the client expects."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Unexpected response from {url}: {reason}")
        self.url = url
        self.reason = reason


class IllegalStateError(BitbucketError):
    """Raised on caller misuse, e.g. requesting the page after the last page."""
    pass


class InvalidCredentialsError(BitbucketError):
    """Raised when required connection settings are missing from the environment."""

    def __init__(self, missing: List[str]):
        super().__init__(
            f"Missing Bitbucket settings: {', '.join(missing)}"
        )
        self.missing = missing


class HttpError(BitbucketError):
    """Base exception for non-2xx responses."""

    def __init__(self, status_code: int, url: str, message: Optional[str] = None):
        text = f"HTTP {status_code} from {url}"
        if message:
            text += f": {message}"
        super().__init__(text)
        self.status_code = status_code
        self.url = url
        self.message = message


class NotFoundError(HttpError):
    """Raised on 404: the project, repository or webhook does not exist."""
    pass


class UnauthorizedError(HttpError):
    """Raised on 401: the credentials were rejected or are missing."""
    pass


class ForbiddenError(HttpError):
    """Raised on 403: the credentials lack permission for the resource."""
    pass


class ConflictError(HttpError):
    """Raised on 409."""
    pass


class FieldError(NamedTuple):
    """One server-reported validation problem."""
    context: Optional[str]
    message: str


class ValidationError(HttpError):
    """Raised on 400. Carries the field-level messages reported by the server."""

    def __init__(
        self,
        status_code: int,
        url: str,
        message: Optional[str] = None,
        field_errors: Optional[List[FieldError]] = None,
    ):
        super().__init__(status_code, url, message)
        self.field_errors = list(field_errors or [])


class ServerError(HttpError):
    """Raised on 5xx."""
    pass


class UnknownError(HttpError):
    """Raised for any other non-2xx status code (including 429)."""
    pass


class RateLimitExceededError(BitbucketError):
    """Raised by the caller-side retry helper when 429s persist after retries."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Bitbucket API still rate limited after {attempts} retries"
        )
        self.attempts = attempts
