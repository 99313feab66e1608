"""
Invoice submission and status tracking.
"""

import asyncio
import base64
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from ksef_client.api.endpoints.invoices import get_invoice_xml
from ksef_client.api.endpoints.sessions import get_invoice_status, send_invoice
from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.config import KsefConfig
from ksef_client.core.poller import DEFAULT_RETRY_ON, NOT_READY, PollResult, Ready, poll_until
from ksef_client.crypto.aes import encrypt_bulk
from ksef_client.crypto.digest import digest
from ksef_client.exceptions import NotFoundError, SessionError
from ksef_client.invoice.mapping import map_to_english
from ksef_client.invoice.parser import xml_to_dict
from ksef_client.models.auth import Credential
from ksef_client.models.invoice import DocumentState, DocumentStatus, SubmittedDocument
from ksef_client.models.session import ExchangeSession

logger = structlog.get_logger(__name__)


class InvoiceService:
    """
    Sends invoices through an open session and tracks their status.

    Security notes:
    - Hashes and sizes of both the plaintext and the ciphertext are sent so
      KSeF can verify the decrypted content.
    - The envelope is only read, never stored: it stays owned by the session.
    """

    def __init__(
        self,
        http_client: AsyncHttpClient,
        config: KsefConfig,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            http_client: HTTP client for API requests.
            config: Client configuration (status poll bounds, download timeout).
            sleep: Awaitable sleep used between status polls.
        """
        self._http = http_client
        self._config = config
        self._sleep = sleep

    async def submit(
        self,
        session: ExchangeSession | None,
        credential: Credential | None,
        plaintext: bytes | str,
    ) -> SubmittedDocument:
        """
        Encrypt an invoice under the session envelope and send it.

        Args:
            session: Open session.
            credential: Access credential.
            plaintext: Invoice XML; strings are encoded as UTF-8.

        Returns:
            The submitted document, in PROCESSING state.

        Raises:
            SessionError: If the session is closed or no credential is given.
        """
        if session is None or not session.is_open:
            msg = "No active session"
            raise SessionError(msg)
        if credential is None:
            msg = "Not logged in. Call login() first."
            raise SessionError(msg)

        data = plaintext.encode("utf-8") if isinstance(plaintext, str) else bytes(plaintext)
        plaintext_hash = digest(data)

        ciphertext = encrypt_bulk(data, session.envelope)
        ciphertext_hash = digest(ciphertext)

        reference = await send_invoice(
            self._http,
            credential.access_token,
            session.reference_number,
            payload={
                "invoiceHash": plaintext_hash,
                "invoiceSize": len(data),
                "encryptedInvoiceHash": ciphertext_hash,
                "encryptedInvoiceSize": len(ciphertext),
                "encryptedInvoiceContent": base64.b64encode(ciphertext).decode("ascii"),
                "offlineMode": False,
            },
        )

        logger.info(
            "Invoice sent",
            reference_number=reference,
            session_reference=session.reference_number,
            size=len(data),
        )
        return SubmittedDocument(
            reference_number=reference,
            session_reference=session.reference_number,
            plaintext_hash=plaintext_hash,
            plaintext_size=len(data),
            ciphertext_hash=ciphertext_hash,
            ciphertext_size=len(ciphertext),
        )

    async def check_status(
        self,
        credential: Credential | None,
        invoice_reference: str,
        session_reference: str | None,
    ) -> DocumentStatus:
        """
        Fetch the current invoice status once.

        Not retried and not cached: the UPO URL in the response is regenerated
        on every call, so call again to get a fresh one.

        Raises:
            SessionError: If no credential or session reference is given.
        """
        if credential is None:
            msg = "Not logged in. Call login() first."
            raise SessionError(msg)
        if not session_reference:
            msg = "No session reference provided"
            raise SessionError(msg)

        status = await get_invoice_status(
            self._http, credential.access_token, session_reference, invoice_reference
        )
        logger.debug(
            "Invoice status",
            reference_number=invoice_reference,
            code=status.code,
            state=str(status.state),
        )
        return status

    async def wait_for_status(
        self,
        credential: Credential | None,
        invoice_reference: str,
        session_reference: str | None,
    ) -> DocumentStatus:
        """
        Poll the invoice status until it is accepted or rejected.

        A 404 right after submission means the invoice is not registered yet
        and counts as not ready. Rejected invoices are returned, not raised.

        Raises:
            PollTimeoutError: If the invoice is still processing after the poll bound.
        """

        async def check() -> PollResult:
            status = await self.check_status(credential, invoice_reference, session_reference)
            if status.state is DocumentState.PROCESSING:
                return NOT_READY
            return Ready(status)

        status = await poll_until(
            check,
            max_attempts=self._config.status_poll_max_attempts,
            interval=self._config.status_poll_interval,
            retry_on=(NotFoundError, *DEFAULT_RETRY_ON),
            sleep=self._sleep,
            operation="invoice status",
        )
        if status.state is DocumentState.REJECTED:
            logger.warning(
                "Invoice rejected",
                reference_number=invoice_reference,
                code=status.code,
                description=status.description,
            )
        return status

    async def get_invoice(
        self, credential: Credential | None, ksef_number: str, *, english: bool = False
    ) -> dict[str, Any]:
        """
        Download an invoice by KSeF number and parse its XML.

        Args:
            credential: Access credential.
            ksef_number: KSeF number, e.g. "3343445677-20260108-0100E055554D-3C".
            english: Translate FA field names to English.

        Returns:
            Nested dict; attributes use the "@_" prefix.

        Raises:
            SessionError: If no credential is given.
        """
        if credential is None:
            msg = "Not logged in. Call login() first."
            raise SessionError(msg)

        xml = await get_invoice_xml(self._http, credential.access_token, ksef_number)
        data = xml_to_dict(xml)
        return map_to_english(data) if english else data

    async def download_receipt(self, upo_download_url: str) -> bytes:
        """
        Download the UPO (official receipt) from a locator taken from a fresh status.

        Security:
            Only pass ``DocumentStatus.upo_download_url`` values.
        """
        return await self._http.request_raw(
            "GET", upo_download_url, timeout=self._config.receipt_download_timeout
        )
