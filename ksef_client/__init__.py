"""
KSeF Python Client.

An async client for the Polish National e-Invoicing System (KSeF) API v2:
token authentication, encrypted online sessions and invoice submission.

Example:
    ```python
    from ksef_client import ContextIdentifier, KsefClient, create_minimal_invoice

    async with KsefClient(
        ksef_token="...",
        context_identifier=ContextIdentifier(value="3343445677"),
    ) as client:
        await client.login()
        await client.open_session()
        document = await client.send_invoice(
            create_minimal_invoice("3343445677", "1234567890", "FA/1/2026")
        )
        session_reference = await client.close_session()
        status = await client.wait_for_invoice_status(
            document.reference_number, session_reference
        )
        print(status.state, status.upo_download_url)
    ```
"""

from ksef_client.client import KsefClient
from ksef_client.config import KsefConfig
from ksef_client.exceptions import (
    APIError,
    AuthenticationError,
    CertificateNotFoundError,
    CryptoError,
    KsefError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    PollTimeoutError,
    RateLimitError,
    ServerError,
    SessionError,
    UnauthorizedError,
)
from ksef_client.invoice import create_minimal_invoice, map_to_english
from ksef_client.models import (
    ContextIdentifier,
    Credential,
    DocumentState,
    DocumentStatus,
    ExchangeSession,
    FormCode,
    SubmittedDocument,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "KsefClient",
    "KsefConfig",
    # Models
    "ContextIdentifier",
    "Credential",
    "DocumentState",
    "DocumentStatus",
    "ExchangeSession",
    "FormCode",
    "SubmittedDocument",
    # Invoice helpers
    "create_minimal_invoice",
    "map_to_english",
    # Exceptions
    "KsefError",
    "AuthenticationError",
    "SessionError",
    "CryptoError",
    "CertificateNotFoundError",
    "PollTimeoutError",
    "MalformedResponseError",
    "APIError",
    "UnauthorizedError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "NetworkError",
]
