"""
Protocol services for the KSeF client.
"""

from ksef_client.services.auth_service import AuthService
from ksef_client.services.certificate_service import CertificateService
from ksef_client.services.invoice_service import InvoiceService
from ksef_client.services.session_service import SessionService

__all__ = [
    "AuthService",
    "CertificateService",
    "InvoiceService",
    "SessionService",
]
