"""
Domain models for the KSeF client.

Mostly immutable (frozen) dataclasses; ExchangeSession owns mutable lifecycle state.
"""

from ksef_client.models.auth import (
    AuthenticationToken,
    AuthFlowState,
    AuthSession,
    AuthState,
    AuthStatus,
    ChallengeContext,
    ContextIdentifier,
    ContextIdentifierType,
    Credential,
)
from ksef_client.models.crypto import CertificateRecord, CertificateUsage, SymmetricEnvelope
from ksef_client.models.invoice import DocumentState, DocumentStatus, SubmittedDocument
from ksef_client.models.session import ExchangeSession, FormCode

__all__ = [
    # Auth
    "AuthFlowState",
    "AuthSession",
    "AuthState",
    "AuthStatus",
    "AuthenticationToken",
    "ChallengeContext",
    "ContextIdentifier",
    "ContextIdentifierType",
    "Credential",
    # Crypto
    "CertificateRecord",
    "CertificateUsage",
    "SymmetricEnvelope",
    # Session
    "ExchangeSession",
    "FormCode",
    # Invoice
    "DocumentState",
    "DocumentStatus",
    "SubmittedDocument",
]
