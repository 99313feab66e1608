"""
Online session domain models.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ksef_client.models.crypto import SymmetricEnvelope


@dataclass(frozen=True, kw_only=True)
class FormCode:
    """
    Schema descriptor of the documents sent in a session.

    Attributes:
        system_code: Schema system code.
        schema_version: Schema version.
        value: Form value.
    """

    system_code: str = "FA (3)"
    schema_version: str = "1-0E"
    value: str = "FA"

    def to_dict(self) -> dict[str, str]:
        return {
            "systemCode": self.system_code,
            "schemaVersion": self.schema_version,
            "value": self.value,
        }


@dataclass(eq=False, kw_only=True)
class ExchangeSession:
    """
    An online document-exchange session and the envelope it owns.

    Created open by SessionService.open(); ``mark_closed()`` destroys the
    envelope and forgets the live reference. Closed sessions keep their former
    reference in ``closed_reference`` for status lookups.
    """

    reference_number: str | None
    form_code: FormCode
    envelope: SymmetricEnvelope | None
    opened_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    closed_reference: str | None = None

    @property
    def is_open(self) -> bool:
        return (
            self.reference_number is not None
            and self.envelope is not None
            and not self.envelope.is_destroyed
        )

    def mark_closed(self) -> str:
        """
        Destroy the envelope and drop the live reference.

        Returns:
            The reference number the session had.
        """
        reference = self.reference_number or self.closed_reference
        if self.envelope is not None:
            self.envelope.destroy()
        self.envelope = None
        self.closed_reference = reference
        self.reference_number = None
        return reference

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        reference = self.reference_number or self.closed_reference
        return f"ExchangeSession(reference={reference!r}, {state})"
