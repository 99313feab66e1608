"""
Public key certificate lookup.

Certificates are fetched on first use and cached for the lifetime of the
service. Rotation while the client is running is not handled.
"""

import structlog

from ksef_client.api.endpoints.common import parse_datetime, parsing_response
from ksef_client.api.endpoints.security import get_public_key_certificates
from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.crypto.rsa import certificate_to_pem, load_public_key
from ksef_client.exceptions import CertificateNotFoundError
from ksef_client.models.crypto import CertificateRecord, CertificateUsage

logger = structlog.get_logger(__name__)


class CertificateService:
    """Selects and caches the KSeF certificate for each usage."""

    def __init__(self, http_client: AsyncHttpClient) -> None:
        self._http = http_client
        self._cache: dict[CertificateUsage, CertificateRecord] = {}

    def cached(self, usage: CertificateUsage) -> CertificateRecord | None:
        return self._cache.get(usage)

    async def fetch(self, usage: CertificateUsage) -> CertificateRecord:
        """
        Get the certificate published for ``usage``.

        The catalog is requested without authentication; the first entry whose
        usage list contains ``usage`` wins.

        Args:
            usage: Purpose of the certificate.

        Returns:
            The selected certificate with its RSA public key.

        Raises:
            CertificateNotFoundError: If no entry has the requested usage.
            CryptoError: If the certificate cannot be parsed.
            MalformedResponseError: If a catalog entry lacks its certificate.
        """
        if (record := self._cache.get(usage)) is not None:
            return record

        logger.debug("Fetching public key certificates", usage=str(usage))
        entries = await get_public_key_certificates(self._http)

        with parsing_response("/security/public-key-certificates"):
            entry = next((e for e in entries if usage in (e.get("usage") or ())), None)
            if entry is None:
                raise CertificateNotFoundError(str(usage))
            pem = certificate_to_pem(entry["certificate"])
            valid_from = parse_datetime(entry.get("validFrom"))
            valid_to = parse_datetime(entry.get("validTo"))

        record = CertificateRecord(
            usage=usage,
            certificate_pem=pem,
            public_key=load_public_key(pem),
            valid_from=valid_from,
            valid_to=valid_to,
        )
        self._cache[usage] = record
        logger.debug("Certificate cached", usage=str(usage), valid_to=record.valid_to)
        return record

    def clear(self) -> None:
        self._cache.clear()
