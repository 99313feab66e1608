"""SHA-256 digests in the base64 form the KSeF API expects."""

import base64
import hashlib


def digest(data: bytes) -> str:
    """Return the standard base64 encoding of SHA-256(data)."""
    return base64.b64encode(hashlib.sha256(data).digest()).decode("ascii")
