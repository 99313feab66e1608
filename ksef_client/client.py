"""
KSeF client facade.

This is the main entry point for users of the library. It owns the current
credential and session and passes them explicitly to the underlying services.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Self

import httpx
import structlog

from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.config import KsefConfig
from ksef_client.exceptions import SessionError
from ksef_client.models.auth import ContextIdentifier, Credential
from ksef_client.models.invoice import DocumentStatus, SubmittedDocument
from ksef_client.models.session import ExchangeSession, FormCode
from ksef_client.services.auth_service import AuthService
from ksef_client.services.certificate_service import CertificateService
from ksef_client.services.invoice_service import InvoiceService
from ksef_client.services.session_service import SessionService

logger = structlog.get_logger(__name__)


class KsefClient:
    """
    Async client for KSeF online invoicing.

    Not safe for concurrent use: one flow (login, open, send, close) per
    instance. Use one instance per concurrent flow.

    Example:
        ```python
        async with KsefClient(
            ksef_token=token,
            context_identifier=ContextIdentifier(value="3343445677"),
        ) as client:
            await client.login()
            await client.open_session()
            document = await client.send_invoice(invoice_xml)
            closed_reference = await client.close_session()
            status = await client.wait_for_invoice_status(
                document.reference_number, closed_reference
            )
        ```

    Args:
        config: Client configuration. Uses defaults if not provided.
        ksef_token: Long-lived KSeF token.
        context_identifier: Identity to authenticate for.
        transport: Optional httpx transport for testing (mock transport).
        sleep: Awaitable sleep used between status polls.
    """

    def __init__(
        self,
        config: KsefConfig | None = None,
        *,
        ksef_token: str,
        context_identifier: ContextIdentifier,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config or KsefConfig()

        self._http = AsyncHttpClient(self._config, transport=transport)
        self._certificates = CertificateService(self._http)
        self._auth_service = AuthService(
            self._http,
            self._certificates,
            self._config,
            ksef_token=ksef_token,
            context_identifier=context_identifier,
            sleep=sleep,
        )
        self._session_service = SessionService(self._http, self._certificates)
        self._invoice_service = InvoiceService(self._http, self._config, sleep=sleep)

        self._credential: Credential | None = None
        self._session: ExchangeSession | None = None

    async def __aenter__(self) -> Self:
        """Enter async context."""
        await self._http.__aenter__()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        """Exit async context."""
        await self.close()

    async def close(self) -> None:
        """
        Release resources.

        A session still open on the server is not closed; its local envelope is
        wiped and the KSeF token is cleared from memory.
        """
        if self._session is not None and self._session.is_open:
            logger.warning(
                "Client closed with an open session",
                reference_number=self._session.reference_number,
            )
            self._session.mark_closed()
        self._auth_service.cleanup()
        self._credential = None
        await self._http.__aexit__(None, None, None)
        logger.debug("Client closed")

    @property
    def credential(self) -> Credential | None:
        return self._credential

    @property
    def session(self) -> ExchangeSession | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._credential is not None

    async def login(self) -> Credential:
        """
        Authenticate with the KSeF token.

        Raises:
            AuthenticationError: If authentication is rejected.
            PollTimeoutError: If the authentication status never resolves.
        """
        self._credential = await self._auth_service.login()
        return self._credential

    async def refresh(self) -> Credential:
        """
        Refresh the access token.

        Raises:
            AuthenticationError: If not logged in or the refresh token is rejected.
        """
        self._credential = await self._auth_service.refresh(self._credential)
        return self._credential

    async def open_session(self, form_code: FormCode | None = None) -> ExchangeSession:
        """
        Open an online session with a new envelope.

        Raises:
            SessionError: If not logged in or a session is already open.
        """
        if self._session is not None and self._session.is_open:
            msg = "A session is already open"
            raise SessionError(msg, reference_number=self._session.reference_number)
        self._session = await self._session_service.open(self._credential, form_code)
        return self._session

    async def close_session(self) -> str:
        """
        Close the current session.

        Returns:
            Reference number of the closed session, for status lookups.

        Raises:
            SessionError: If no session is open.
        """
        return await self._session_service.close(self._credential, self._session)

    async def send_invoice(self, invoice_xml: bytes | str) -> SubmittedDocument:
        """
        Encrypt and send an invoice in the current session.

        Raises:
            SessionError: If no session is open.
        """
        return await self._invoice_service.submit(self._session, self._credential, invoice_xml)

    async def check_invoice_status(
        self, invoice_reference: str, session_reference: str | None = None
    ) -> DocumentStatus:
        """
        Get the invoice status once.

        Args:
            invoice_reference: Reference returned by send_invoice().
            session_reference: Session reference; defaults to the current or
                most recently closed session.
        """
        return await self._invoice_service.check_status(
            self._credential, invoice_reference, session_reference or self._session_reference()
        )

    async def wait_for_invoice_status(
        self, invoice_reference: str, session_reference: str | None = None
    ) -> DocumentStatus:
        """Poll the invoice status until it is accepted or rejected."""
        return await self._invoice_service.wait_for_status(
            self._credential, invoice_reference, session_reference or self._session_reference()
        )

    async def get_invoice(self, ksef_number: str, *, english: bool = False) -> dict[str, Any]:
        """Download and parse an invoice by KSeF number."""
        return await self._invoice_service.get_invoice(
            self._credential, ksef_number, english=english
        )

    async def download_receipt(self, upo_download_url: str) -> bytes:
        """Download the UPO of an invoice from a fresh status locator."""
        return await self._invoice_service.download_receipt(upo_download_url)

    def _session_reference(self) -> str | None:
        if self._session is None:
            return None
        return self._session.reference_number or self._session.closed_reference
