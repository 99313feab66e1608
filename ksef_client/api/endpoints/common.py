"""Response parsing helpers shared by endpoint modules."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from ksef_client.exceptions import MalformedResponseError


@contextmanager
def parsing_response(endpoint: str) -> Iterator[None]:
    """Report missing or mistyped fields of a response body as MalformedResponseError."""
    try:
        yield
    except KeyError as e:
        msg = f"Response is missing field {e.args[0]!r}"
        raise MalformedResponseError(msg, endpoint=endpoint) from e
    except (TypeError, ValueError, AttributeError) as e:
        msg = f"Unexpected response shape: {e}"
        raise MalformedResponseError(msg, endpoint=endpoint) from e


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp from the API; naive values are taken as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_status(data: dict[str, Any]) -> tuple[int, str, tuple[str, ...]]:
    """Split a ``{"code", "description", "details"}`` status object."""
    status = data.get("status") or {}
    details = status.get("details") or ()
    return (
        int(status.get("code", 0)),
        status.get("description", ""),
        tuple(str(d) for d in details),
    )
