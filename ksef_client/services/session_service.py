"""
Online session management.

Each session gets its own AES envelope. The envelope key is sent to KSeF
encrypted under the symmetric key encryption certificate and wiped locally
when the session closes.
"""

import base64

import structlog

from ksef_client.api.endpoints.sessions import close_online_session, open_online_session
from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.crypto.aes import generate_symmetric_envelope
from ksef_client.crypto.rsa import encrypt_short_secret_b64
from ksef_client.exceptions import SessionError
from ksef_client.models.auth import Credential
from ksef_client.models.crypto import CertificateUsage
from ksef_client.models.session import ExchangeSession, FormCode
from ksef_client.services.certificate_service import CertificateService

logger = structlog.get_logger(__name__)


class SessionService:
    """Opens and closes online document-exchange sessions."""

    def __init__(self, http_client: AsyncHttpClient, certificates: CertificateService) -> None:
        """
        Args:
            http_client: HTTP client for API requests.
            certificates: Certificate lookup shared with the auth service.
        """
        self._http = http_client
        self._certificates = certificates

    async def open(
        self, credential: Credential | None, form_code: FormCode | None = None
    ) -> ExchangeSession:
        """
        Open an online session with a freshly generated envelope.

        Args:
            credential: Access credential from AuthService.login().
            form_code: Schema of the invoices to send; FA (3) by default.

        Returns:
            The open session, owning its envelope.

        Raises:
            SessionError: If no credential is given.
            CertificateNotFoundError: If no symmetric key certificate is published.
        """
        if credential is None:
            msg = "Not logged in. Call login() first."
            raise SessionError(msg)

        form_code = form_code or FormCode()
        certificate = await self._certificates.fetch(CertificateUsage.SYMMETRIC_KEY_ENCRYPTION)

        envelope = generate_symmetric_envelope()
        try:
            encrypted_key = encrypt_short_secret_b64(bytes(envelope.key), certificate.public_key)
            reference = await open_online_session(
                self._http,
                credential.access_token,
                form_code=form_code,
                encrypted_symmetric_key=encrypted_key,
                initialization_vector=base64.b64encode(envelope.iv).decode("ascii"),
            )
        except BaseException:
            envelope.destroy()
            raise

        logger.info("Session opened", reference_number=reference, form=form_code.system_code)
        return ExchangeSession(reference_number=reference, form_code=form_code, envelope=envelope)

    async def close(self, credential: Credential | None, session: ExchangeSession | None) -> str:
        """
        Close a session and destroy its envelope.

        On failure the session is left open and the error propagates.

        Returns:
            Reference number of the closed session.

        Raises:
            SessionError: If the session is not open or no credential is given.
        """
        if session is None or not session.is_open:
            msg = "No active session"
            raise SessionError(msg)
        if credential is None:
            msg = "Not logged in. Call login() first."
            raise SessionError(msg)

        await close_online_session(self._http, credential.access_token, session.reference_number)

        reference = session.mark_closed()
        logger.info("Session closed", reference_number=reference)
        return reference
