"""
Invoice submission domain models.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

INVOICE_ACCEPTED_CODE = 200
INVOICE_REJECTED_MIN_CODE = 400


class DocumentState(StrEnum):
    """Processing state of a submitted invoice."""

    PROCESSING = "processing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not DocumentState.PROCESSING


@dataclass(frozen=True, kw_only=True)
class SubmittedDocument:
    """
    An invoice accepted for processing by an online session.

    Attributes:
        reference_number: Server reference of the invoice.
        session_reference: Reference of the session the invoice was sent in.
        plaintext_hash: Base64 SHA-256 of the invoice XML.
        plaintext_size: Size of the invoice XML in bytes.
        ciphertext_hash: Base64 SHA-256 of the encrypted invoice.
        ciphertext_size: Size of the encrypted invoice in bytes.
        status: State at submission time.
    """

    reference_number: str
    session_reference: str
    plaintext_hash: str
    plaintext_size: int
    ciphertext_hash: str
    ciphertext_size: int
    status: DocumentState = DocumentState.PROCESSING


@dataclass(frozen=True, kw_only=True)
class DocumentStatus:
    """
    Snapshot of an invoice status.

    The UPO download URL is regenerated by the server on every status request,
    so snapshots should not be cached for later downloads.

    Attributes:
        reference_number: Invoice reference.
        code: Server status code.
        description: Human readable description.
        details: Additional details (rejection reasons).
        ksef_number: KSeF number assigned once accepted.
        invoice_number: Seller's invoice number.
        upo_download_url: Fresh receipt (UPO) locator, when available.
        acquisition_date: Date KSeF registered the invoice.
    """

    reference_number: str
    code: int
    description: str = ""
    details: tuple[str, ...] = ()
    ksef_number: str | None = None
    invoice_number: str | None = None
    upo_download_url: str | None = None
    acquisition_date: datetime | None = None

    @property
    def state(self) -> DocumentState:
        if self.code == INVOICE_ACCEPTED_CODE:
            return DocumentState.ACCEPTED
        if self.code >= INVOICE_REJECTED_MIN_CODE:
            return DocumentState.REJECTED
        return DocumentState.PROCESSING

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal
