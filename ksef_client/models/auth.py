"""
Authentication-related domain models.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import StrEnum

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

AUTH_SUCCESS_CODE = 200
AUTH_FAILURE_MIN_CODE = 400


class ContextIdentifierType(StrEnum):
    """Kinds of identity a client can authenticate on behalf of."""

    NIP = "Nip"
    INTERNAL_ID = "InternalId"
    NIP_VAT_UE = "NipVatUe"


class AuthState(StrEnum):
    """Outcome of an authentication operation as reported by the server."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class AuthFlowState(StrEnum):
    """Steps of the token authentication flow."""

    INIT = "init"
    CERTIFICATE_FETCHED = "certificate_fetched"
    CHALLENGE_ISSUED = "challenge_issued"
    TOKEN_SUBMITTED = "token_submitted"
    AWAITING_STATUS = "awaiting_status"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


@dataclass(frozen=True, kw_only=True)
class ContextIdentifier:
    """
    Identity (tax number or similar) the client acts for.

    Attributes:
        type: Identifier kind, e.g. "Nip".
        value: Identifier value.
    """

    type: str = ContextIdentifierType.NIP
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"type": str(self.type), "value": self.value}


@dataclass(frozen=True, kw_only=True)
class Credential:
    """
    Access and refresh token pair issued after authentication.

    Attributes:
        access_token: Bearer token for session and invoice calls.
        refresh_token: Token used to obtain a new access token.
        access_valid_until: Access token expiry, when reported.
        refresh_valid_until: Refresh token expiry, when reported.
    """

    access_token: str
    refresh_token: str
    access_valid_until: datetime | None = None
    refresh_valid_until: datetime | None = None

    def __repr__(self) -> str:
        return (
            f"Credential(access_token='***', refresh_token='***', "
            f"access_valid_until={self.access_valid_until!r})"
        )


@dataclass(frozen=True, kw_only=True)
class ChallengeContext:
    """
    Server-issued challenge used once to build the encrypted token.

    Attributes:
        challenge: Opaque challenge value.
        timestamp: Challenge issue time.
    """

    challenge: str
    timestamp: datetime

    @property
    def timestamp_ms(self) -> int:
        """Unix timestamp in milliseconds, truncated. Naive times are taken as UTC."""
        ts = self.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return (ts - _EPOCH) // _ONE_MS


@dataclass(frozen=True, kw_only=True)
class AuthenticationToken:
    """Short-lived token used to poll and redeem an authentication operation."""

    token: str
    valid_until: datetime | None = None

    def __repr__(self) -> str:
        return f"AuthenticationToken(token='***', valid_until={self.valid_until!r})"


@dataclass(frozen=True, kw_only=True)
class AuthStatus:
    """
    Status of an authentication operation.

    Attributes:
        code: Server status code (100 in progress, 200 success, >= 400 failure).
        description: Human readable description.
        details: Additional details, if any.
    """

    code: int
    description: str = ""
    details: tuple[str, ...] = ()

    @property
    def state(self) -> AuthState:
        if self.code == AUTH_SUCCESS_CODE:
            return AuthState.SUCCESS
        if self.code >= AUTH_FAILURE_MIN_CODE:
            return AuthState.FAILED
        return AuthState.PENDING


@dataclass(frozen=True, kw_only=True)
class AuthSession:
    """
    An authentication operation started by submitting the encrypted token.

    Attributes:
        reference_number: Server reference of the operation.
        authentication_token: Token to poll status and redeem credentials.
        started_at: Local time the operation was started.
    """

    reference_number: str
    authentication_token: AuthenticationToken
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
