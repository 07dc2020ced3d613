"""Bitbucket Server client library.

This package provides Python abstractions over the Bitbucket Server REST API
(rest/api/1.0): an authenticated JSON request executor, lazy streams over
paginated collections, and webhook, project and repository clients.
"""

from .errors import (
    BitbucketError,
    TransportError,
    ResponseParseError,
    IllegalStateError,
    InvalidCredentialsError,
    HttpError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    FieldError,
    ValidationError,
    ServerError,
    UnknownError,
    RateLimitExceededError,
)

__all__ = [
    "BitbucketError",
    "TransportError",
    "ResponseParseError",
    "IllegalStateError",
    "InvalidCredentialsError",
    "HttpError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "FieldError",
    "ValidationError",
    "ServerError",
    "UnknownError",
    "RateLimitExceededError",
]
