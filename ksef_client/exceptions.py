"""
KSeF client exception hierarchy.

All exceptions inherit from KsefError for easy catching.
"""

from typing import Any


class KsefError(Exception):
    """Base exception for all ksef_client errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class AuthenticationError(KsefError):
    """Authentication was rejected or could not be completed."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        if code is None:
            super().__init__(message)
        else:
            super().__init__(message, code=code)
        self.code = code


class SessionError(KsefError):
    """Session operation invoked out of order (no credential, session closed)."""


class CryptoError(KsefError):
    """Cryptographic operation failed."""


class CertificateNotFoundError(CryptoError):
    """No public key certificate is published for the requested usage."""

    def __init__(self, usage: str) -> None:
        super().__init__(f"No certificate found for usage {usage}", usage=usage)
        self.usage = usage


class PollTimeoutError(KsefError):
    """Polling attempts exhausted without a conclusive result."""

    def __init__(self, message: str = "Polling timed out", *, attempts: int) -> None:
        super().__init__(message, attempts=attempts)
        self.attempts = attempts


class MalformedResponseError(KsefError):
    """Successful response lacks a field or carries a value of the wrong shape."""

    def __init__(self, message: str, *, endpoint: str) -> None:
        super().__init__(message, endpoint=endpoint)
        self.endpoint = endpoint


class APIError(KsefError):
    """API request failed."""

    def __init__(self, message: str, *, code: int, endpoint: str | None = None) -> None:
        super().__init__(message, code=code, endpoint=endpoint)
        self.code = code
        self.endpoint = endpoint


class UnauthorizedError(APIError):
    """Bearer token missing, expired or rejected (401)."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message, code=401, endpoint=endpoint)


class NotFoundError(APIError):
    """Resource not found (session, invoice, auth operation)."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message, code=404, endpoint=endpoint)


class RateLimitError(APIError):
    """Rate limited by API."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message, code=429, endpoint=endpoint)
        self.retry_after = retry_after


class ServerError(APIError):
    """Server-side error (5xx)."""

    def __init__(self, message: str, *, code: int = 500, endpoint: str | None = None) -> None:
        super().__init__(message, code=code, endpoint=endpoint)


class NetworkError(KsefError):
    """Network-level error (connection failed, timeout)."""
