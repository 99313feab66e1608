"""
Authentication service for KSeF.

Handles the KSeF token challenge/response flow and access token refresh.
"""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from ksef_client.api.endpoints.auth import (
    generate_challenge,
    get_auth_status,
    redeem_token,
    refresh_access_token,
    submit_ksef_token,
)
from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.config import KsefConfig
from ksef_client.core.poller import NOT_READY, Fatal, PollResult, Ready, poll_until
from ksef_client.core.secure_bytes import SecureBytes
from ksef_client.crypto.rsa import encrypt_short_secret_b64
from ksef_client.exceptions import (
    APIError,
    AuthenticationError,
    KsefError,
    MalformedResponseError,
    RateLimitError,
    ServerError,
)
from ksef_client.models.auth import (
    AuthFlowState,
    AuthSession,
    AuthState,
    AuthStatus,
    ChallengeContext,
    ContextIdentifier,
    Credential,
)
from ksef_client.models.crypto import CertificateUsage
from ksef_client.services.certificate_service import CertificateService

logger = structlog.get_logger(__name__)


class AuthService:
    """
    Authenticates with a KSeF token.

    Flow: fetch the token encryption certificate (cached), request a
    challenge, encrypt ``token|timestampMs`` with RSA-OAEP, submit it, poll the
    operation status and redeem the authentication token for a credential.

    The KSeF token is held in a SecureBytes buffer and wiped by ``cleanup()``.
    The service does not keep the issued credential; callers pass it back to
    ``refresh()``.
    """

    def __init__(
        self,
        http_client: AsyncHttpClient,
        certificates: CertificateService,
        config: KsefConfig,
        *,
        ksef_token: str,
        context_identifier: ContextIdentifier,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            http_client: HTTP client for API requests.
            certificates: Certificate lookup shared with the session service.
            config: Client configuration (poll bounds).
            ksef_token: Long-lived KSeF token.
            context_identifier: Identity to authenticate for.
            sleep: Awaitable sleep used between status polls.
        """
        self._http = http_client
        self._certificates = certificates
        self._config = config
        self._token = SecureBytes(ksef_token.encode("utf-8"))
        self._context = context_identifier
        self._sleep = sleep
        self._state = AuthFlowState.INIT

    @property
    def state(self) -> AuthFlowState:
        return self._state

    async def login(self) -> Credential:
        """
        Run the full token authentication flow.

        Returns:
            Access and refresh tokens.

        Raises:
            AuthenticationError: If the server rejects the authentication or
                the token/context is missing.
            PollTimeoutError: If the status never resolves within the poll bound.
            CertificateNotFoundError: If no token encryption certificate is published.
            NetworkError: If the API cannot be reached.
            RateLimitError: If a request outside status polling is throttled.
        """
        if not self._token or not self._context.value:
            msg = "KSeF token and context identifier are required"
            raise AuthenticationError(msg)

        logger.info("Starting authentication", context_type=self._context.type)
        self._state = AuthFlowState.INIT

        try:
            certificate = await self._certificates.fetch(CertificateUsage.KSEF_TOKEN_ENCRYPTION)
            self._state = AuthFlowState.CERTIFICATE_FETCHED

            challenge = await generate_challenge(self._http)
            self._state = AuthFlowState.CHALLENGE_ISSUED

            encrypted_token = encrypt_short_secret_b64(
                self._token_plaintext(challenge), certificate.public_key
            )
            auth_session = await submit_ksef_token(
                self._http,
                challenge=challenge.challenge,
                context_identifier=self._context,
                encrypted_token=encrypted_token,
            )
            self._state = AuthFlowState.TOKEN_SUBMITTED
            logger.debug("Token submitted", reference_number=auth_session.reference_number)

            self._state = AuthFlowState.AWAITING_STATUS
            await self._wait_for_success(auth_session)

            credential = await redeem_token(self._http, auth_session.authentication_token.token)
            self._state = AuthFlowState.AUTHENTICATED
            logger.info("Authentication successful", reference_number=auth_session.reference_number)
            return credential

        except (ServerError, RateLimitError):
            self._state = AuthFlowState.FAILED
            raise
        except MalformedResponseError as e:
            self._state = AuthFlowState.FAILED
            if not e.endpoint.startswith("/auth/"):
                raise
            msg = "Malformed authentication response"
            logger.error(msg, endpoint=e.endpoint)
            raise AuthenticationError(msg) from e
        except APIError as e:
            self._state = AuthFlowState.FAILED
            logger.error("Authentication rejected", code=e.code, endpoint=e.endpoint)
            raise AuthenticationError(e.message, code=e.code) from e
        except KsefError:
            self._state = AuthFlowState.FAILED
            raise

    async def refresh(self, credential: Credential | None) -> Credential:
        """
        Exchange the refresh token for a new access token.

        Does not re-run the challenge flow; if the refresh token is rejected
        callers must login() again.

        Raises:
            AuthenticationError: If no credential is given or the refresh token is rejected.
        """
        if credential is None:
            msg = "Not logged in. Call login() first."
            raise AuthenticationError(msg)

        logger.debug("Refreshing access token")
        try:
            refreshed = await refresh_access_token(self._http, credential)
        except (ServerError, RateLimitError):
            raise
        except APIError as e:
            msg = f"Token refresh failed: {e.message}"
            raise AuthenticationError(msg, code=e.code) from e

        logger.info("Access token refreshed")
        return refreshed

    def cleanup(self) -> None:
        """Wipe the KSeF token from memory."""
        self._token.clear()

    def _token_plaintext(self, challenge: ChallengeContext) -> bytes:
        return bytes(self._token) + f"|{challenge.timestamp_ms}".encode("ascii")

    async def _wait_for_success(self, auth_session: AuthSession) -> AuthStatus:
        token = auth_session.authentication_token.token

        async def check() -> PollResult:
            status = await get_auth_status(self._http, auth_session.reference_number, token)
            if status.state is AuthState.SUCCESS:
                return Ready(status)
            if status.state is AuthState.FAILED:
                logger.warning(
                    "Authentication failed",
                    code=status.code,
                    description=status.description,
                )
                return Fatal(AuthenticationError(status.description, code=status.code))
            return NOT_READY

        return await poll_until(
            check,
            max_attempts=self._config.auth_poll_max_attempts,
            interval=self._config.auth_poll_interval,
            sleep=self._sleep,
            operation="authentication",
        )
