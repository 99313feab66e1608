"""
Cryptographic operations for the KSeF client.

This module provides:
- RSA-OAEP encryption of the KSeF token and session keys
- AES-256-CBC encryption of invoice content (session envelope)
- Base64 SHA-256 digests
"""

from ksef_client.crypto.aes import decrypt_bulk, encrypt_bulk, generate_symmetric_envelope
from ksef_client.crypto.digest import digest
from ksef_client.crypto.rsa import (
    certificate_to_pem,
    encrypt_short_secret,
    encrypt_short_secret_b64,
    load_public_key,
    max_oaep_payload,
)

__all__ = [
    "certificate_to_pem",
    "decrypt_bulk",
    "digest",
    "encrypt_bulk",
    "encrypt_short_secret",
    "encrypt_short_secret_b64",
    "generate_symmetric_envelope",
    "load_public_key",
    "max_oaep_payload",
]
