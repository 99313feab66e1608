"""
KSeF client configuration.
"""

import os
from dataclasses import dataclass
from typing import Self

_ENV_PREFIX = "KSEF_"


@dataclass(frozen=True, kw_only=True)
class KsefConfig:
    """
    Attributes:
        api_url: Base URL of the KSeF API (v2).
        timeout: Request timeout in seconds.
        user_agent: User-Agent header value.
        auth_poll_max_attempts: Maximum number of authentication status checks.
        auth_poll_interval: Delay between authentication status checks in seconds.
        status_poll_max_attempts: Maximum number of invoice status checks.
        status_poll_interval: Delay between invoice status checks in seconds.
        receipt_download_timeout: Timeout for downloading a UPO document in seconds.
    """

    api_url: str = "https://api-test.ksef.mf.gov.pl/v2"
    timeout: float = 30.0
    user_agent: str = "ksef-client-python/0.1"
    auth_poll_max_attempts: int = 10
    auth_poll_interval: float = 2.0
    status_poll_max_attempts: int = 10
    status_poll_interval: float = 2.0
    receipt_download_timeout: float = 60.0

    def __post_init__(self) -> None:
        if not self.api_url:
            msg = "api_url must not be empty"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        if self.receipt_download_timeout <= 0:
            msg = "receipt_download_timeout must be positive"
            raise ValueError(msg)
        if self.auth_poll_max_attempts <= 0:
            msg = "auth_poll_max_attempts must be positive"
            raise ValueError(msg)
        if self.status_poll_max_attempts <= 0:
            msg = "status_poll_max_attempts must be positive"
            raise ValueError(msg)
        if self.auth_poll_interval < 0:
            msg = "auth_poll_interval must be non-negative"
            raise ValueError(msg)
        if self.status_poll_interval < 0:
            msg = "status_poll_interval must be non-negative"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Self:
        """
        Build a config from ``KSEF_*`` environment variables.

        Unset variables keep their defaults. Recognized variables are
        ``KSEF_API_URL``, ``KSEF_TIMEOUT``, ``KSEF_AUTH_POLL_MAX_ATTEMPTS``,
        ``KSEF_AUTH_POLL_INTERVAL``, ``KSEF_STATUS_POLL_MAX_ATTEMPTS`` and
        ``KSEF_STATUS_POLL_INTERVAL``.

        Raises:
            ValueError: If a variable cannot be converted or fails validation.
        """
        env = os.environ if environ is None else environ
        converters = {
            "api_url": str,
            "timeout": float,
            "auth_poll_max_attempts": int,
            "auth_poll_interval": float,
            "status_poll_max_attempts": int,
            "status_poll_interval": float,
        }
        values = {}
        for field_name, convert in converters.items():
            raw = env.get(_ENV_PREFIX + field_name.upper())
            if raw is None or raw == "":
                continue
            values[field_name] = convert(raw)
        return cls(**values)
