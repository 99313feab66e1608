"""
RSA-OAEP encryption of short secrets under KSeF public key certificates.

Used for the KSeF token (authentication) and the session AES key.
"""

import base64
import binascii

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from ksef_client.exceptions import CryptoError

_PEM_HEADER = "-----BEGIN CERTIFICATE-----"
_PEM_FOOTER = "-----END CERTIFICATE-----"
_PEM_LINE_LENGTH = 64
_SHA256_SIZE = 32


def certificate_to_pem(b64_der: str) -> str:
    """
    Frame a base64 DER certificate as PEM.

    The body is wrapped at 64 characters per line, with no trailing newline
    after the footer.

    Args:
        b64_der: Base64-encoded DER certificate as published by the API.

    Returns:
        PEM text.

    Raises:
        CryptoError: If the input is empty.
    """
    body = "".join(b64_der.split())
    if not body:
        msg = "Empty certificate"
        raise CryptoError(msg)
    lines = [body[i : i + _PEM_LINE_LENGTH] for i in range(0, len(body), _PEM_LINE_LENGTH)]
    return _PEM_HEADER + "\n" + "\n".join(lines) + "\n" + _PEM_FOOTER


def load_public_key(certificate_pem: str) -> RSAPublicKey:
    """
    Extract the RSA public key from a PEM certificate.

    Raises:
        CryptoError: If the certificate cannot be parsed or the key is not RSA.
    """
    try:
        certificate = x509.load_pem_x509_certificate(certificate_pem.encode("ascii"))
    except (ValueError, UnicodeEncodeError, binascii.Error) as e:
        msg = "Malformed certificate"
        raise CryptoError(msg) from e

    public_key = certificate.public_key()
    if not isinstance(public_key, RSAPublicKey):
        msg = f"Unsupported certificate key type: {type(public_key).__name__}"
        raise CryptoError(msg)
    return public_key


def max_oaep_payload(public_key: RSAPublicKey) -> int:
    """Largest plaintext OAEP with SHA-256 accepts for this key."""
    return public_key.key_size // 8 - 2 * _SHA256_SIZE - 2


def encrypt_short_secret(secret: bytes, public_key: RSAPublicKey) -> bytes:
    """
    Encrypt a short secret with RSA-OAEP (MGF1 SHA-256, SHA-256 digest).

    Args:
        secret: Data to encrypt, at most ``max_oaep_payload(public_key)`` bytes.
        public_key: Recipient RSA public key.

    Returns:
        Raw ciphertext.

    Raises:
        CryptoError: If the secret is too large or the key is unusable.
    """
    if not isinstance(public_key, RSAPublicKey):
        msg = f"Expected an RSA public key, got {type(public_key).__name__}"
        raise CryptoError(msg)

    limit = max_oaep_payload(public_key)
    if len(secret) > limit:
        msg = f"Secret too large for RSA-OAEP: {len(secret)} > {limit} bytes"
        raise CryptoError(msg)

    try:
        return public_key.encrypt(
            secret,
            padding.OAEP(
                mgf=padding.MGF1(algorithm=hashes.SHA256()),
                algorithm=hashes.SHA256(),
                label=None,
            ),
        )
    except ValueError as e:
        msg = "RSA encryption failed"
        raise CryptoError(msg) from e


def encrypt_short_secret_b64(secret: bytes, public_key: RSAPublicKey) -> str:
    """Same as encrypt_short_secret, base64-encoded for the wire."""
    return base64.b64encode(encrypt_short_secret(secret, public_key)).decode("ascii")
