"""
Cryptographic domain models.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from ksef_client.core.secure_bytes import SecureBytes

AES_KEY_SIZE = 32
AES_BLOCK_SIZE = 16


class CertificateUsage(StrEnum):
    """Usage tags of the KSeF public key certificates."""

    KSEF_TOKEN_ENCRYPTION = "KsefTokenEncryption"
    SYMMETRIC_KEY_ENCRYPTION = "SymmetricKeyEncryption"


@dataclass(frozen=True, kw_only=True)
class CertificateRecord:
    """
    A KSeF public key certificate selected for one usage.

    Attributes:
        usage: The usage the certificate was selected for.
        certificate_pem: PEM framed certificate.
        public_key: RSA public key extracted from the certificate.
        valid_from: Start of validity as published by the API.
        valid_to: End of validity as published by the API.
    """

    usage: CertificateUsage
    certificate_pem: str
    public_key: RSAPublicKey
    valid_from: datetime | None = None
    valid_to: datetime | None = None


@dataclass(frozen=True, kw_only=True, eq=False)
class SymmetricEnvelope:
    """
    AES-256 key and IV pair scoped to a single online session.

    The key lives in a SecureBytes buffer so ``destroy()`` can wipe it when
    the session closes. An envelope must never encrypt two different payloads
    across sessions.

    Attributes:
        key: 32-byte AES key.
        iv: 16-byte CBC initialization vector.
    """

    key: SecureBytes
    iv: bytes

    def __post_init__(self) -> None:
        if len(self.key) != AES_KEY_SIZE:
            msg = f"Envelope key must be {AES_KEY_SIZE} bytes, got {len(self.key)}"
            raise ValueError(msg)
        if len(self.iv) != AES_BLOCK_SIZE:
            msg = f"Envelope IV must be {AES_BLOCK_SIZE} bytes, got {len(self.iv)}"
            raise ValueError(msg)

    @property
    def is_destroyed(self) -> bool:
        return self.key.is_cleared

    def destroy(self) -> None:
        """Wipe the key. Idempotent."""
        self.key.clear()
