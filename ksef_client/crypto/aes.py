"""
AES-256-CBC encryption of invoice content under a session envelope.
"""

import secrets

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ksef_client.core.secure_bytes import SecureBytes
from ksef_client.exceptions import CryptoError
from ksef_client.models.crypto import AES_BLOCK_SIZE, AES_KEY_SIZE, SymmetricEnvelope

_PADDING_BITS = AES_BLOCK_SIZE * 8


def generate_symmetric_envelope() -> SymmetricEnvelope:
    """
    Generate a fresh AES-256 key and CBC IV from the OS CSPRNG.

    Returns:
        A new envelope. Never reuse it across sessions.
    """
    return SymmetricEnvelope(
        key=SecureBytes.random(AES_KEY_SIZE),
        iv=secrets.token_bytes(AES_BLOCK_SIZE),
    )


def encrypt_bulk(plaintext: bytes, envelope: SymmetricEnvelope) -> bytes:
    """
    Encrypt data with AES-256-CBC and PKCS#7 padding.

    Output is deterministic for a given envelope; callers must not encrypt two
    independent payloads under envelopes sharing a key and IV.

    Args:
        plaintext: Data of any length, including empty.
        envelope: Live session envelope.

    Returns:
        Ciphertext, a non-empty multiple of 16 bytes.

    Raises:
        CryptoError: If the envelope has been destroyed.
    """
    cipher = _cipher(envelope)

    padder = padding.PKCS7(_PADDING_BITS).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = cipher.encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def decrypt_bulk(ciphertext: bytes, envelope: SymmetricEnvelope) -> bytes:
    """
    Inverse of encrypt_bulk.

    Raises:
        CryptoError: If the envelope is destroyed or the padding is invalid.
    """
    if len(ciphertext) == 0 or len(ciphertext) % AES_BLOCK_SIZE:
        msg = f"Ciphertext length {len(ciphertext)} is not a multiple of {AES_BLOCK_SIZE}"
        raise CryptoError(msg)

    decryptor = _cipher(envelope).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(_PADDING_BITS).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        msg = "Invalid padding, possibly wrong key"
        raise CryptoError(msg) from e


def _cipher(envelope: SymmetricEnvelope) -> Cipher:
    if envelope.is_destroyed:
        msg = "Symmetric envelope has been destroyed"
        raise CryptoError(msg)
    return Cipher(algorithms.AES(bytes(envelope.key)), modes.CBC(envelope.iv))
