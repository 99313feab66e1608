"""
Async HTTP client for the KSeF API.

Provides a clean interface for making API requests with per-call bearer
tokens and mapping of HTTP errors onto the exception hierarchy.
"""

import asyncio
from typing import Any

import httpx
import structlog

from ksef_client.config import KsefConfig
from ksef_client.exceptions import (
    APIError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)

logger = structlog.get_logger(__name__)

SENSITIVE_KEYS = frozenset(
    {
        "token",
        "accessToken",
        "refreshToken",
        "authenticationToken",
        "encryptedToken",
        "challenge",
        "encryptedSymmetricKey",
        "initializationVector",
        "encryptedInvoiceContent",
        "upoDownloadUrl",
    }
)


def sanitize_for_log(data: Any) -> Any:
    """
    Remove sensitive fields from a payload before logging.

    Recursively sanitizes nested dictionaries and lists.

    Args:
        data: JSON-like value that may contain sensitive values.

    Returns:
        Copy with sensitive values replaced by "***".
    """
    if isinstance(data, list):
        return [sanitize_for_log(item) for item in data]
    if not isinstance(data, dict):
        return data

    result = {}
    for key, value in data.items():
        if key in SENSITIVE_KEYS:
            result[key] = "***"
        else:
            result[key] = sanitize_for_log(value)
    return result


def extract_error_message(data: Any, default: str) -> str:
    """
    Pull a human readable message out of a KSeF error body.

    Understands the ``exception.exceptionDetailList`` envelope as well as
    problem-details style ``detail`` / ``title`` fields.
    """
    if not isinstance(data, dict):
        return default

    exception = data.get("exception")
    if isinstance(exception, dict):
        descriptions = [
            d.get("exceptionDescription")
            for d in exception.get("exceptionDetailList") or []
            if isinstance(d, dict) and d.get("exceptionDescription")
        ]
        if descriptions:
            return "; ".join(descriptions)

    for key in ("detail", "title", "message"):
        if isinstance(data.get(key), str) and data[key]:
            return data[key]
    return default


class AsyncHttpClient:
    """Async HTTP client for the KSeF API."""

    def __init__(
        self,
        config: KsefConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: Client configuration.
            transport: Optional transport for testing (mock transport).
        """
        self._config = config
        self._transport = transport

        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def __aenter__(self) -> "AsyncHttpClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._config.api_url.rstrip("/"),
                    timeout=self._config.timeout,
                    transport=self._transport,
                    headers={
                        "Accept": "application/json",
                        "User-Agent": self._config.user_agent,
                    },
                )
        return self._client

    async def _close(self) -> None:
        async with self._client_lock:
            if self._client is None:
                logger.debug("Client not open.")
                return
            await self._client.aclose()
            self._client = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> Any:
        """
        Make a JSON API request.

        Args:
            method: HTTP method (GET, POST, etc.).
            endpoint: API endpoint relative to the base URL (e.g., "/auth/challenge").
            json: JSON body for POST requests.
            params: Query parameters.
            token: Bearer token; the request is unauthenticated when omitted.

        Returns:
            Decoded JSON body, or an empty dict for an empty 2xx response.

        Raises:
            APIError: If the API returns an error status.
            NetworkError: If the request fails due to network issues.
        """
        response = await self._send(method, endpoint, json=json, params=params, token=token)

        if not response.content:
            return {}

        try:
            data = response.json()
        except ValueError as e:
            raise APIError(
                "Invalid JSON response from API",
                code=response.status_code,
                endpoint=endpoint,
            ) from e

        logger.debug(
            "API response",
            method=method,
            endpoint=endpoint,
            status=response.status_code,
            body=sanitize_for_log(data),
        )
        return data

    async def request_no_content(
        self,
        method: str,
        endpoint: str,
        *,
        json: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> None:
        """
        Make an API request whose success response body is not used.

        Any 2xx answer counts as success, whatever its body.

        Raises:
            APIError: If the API returns an error status.
            NetworkError: If the request fails due to network issues.
        """
        response = await self._send(method, endpoint, json=json, token=token)
        logger.debug(
            "API response", method=method, endpoint=endpoint, status=response.status_code
        )

    async def request_text(
        self,
        method: str,
        endpoint: str,
        *,
        token: str | None = None,
        accept: str = "application/xml",
    ) -> str:
        """
        Make an API request returning a text document (invoice XML).

        Raises:
            APIError: If the API returns an error status.
            NetworkError: If the request fails due to network issues.
        """
        response = await self._send(method, endpoint, token=token, accept=accept)
        return response.text

    async def request_raw(
        self,
        method: str,
        url: str,
        *,
        timeout: float | None = None,
    ) -> bytes:
        """
        Make a raw HTTP request (for UPO downloads).

        Security:
            This method accepts arbitrary URLs. To prevent SSRF attacks,
            only pass URLs obtained from KSeF API responses
            (e.g., upoDownloadUrl from an invoice status).
            NEVER pass user-supplied input directly to this method.

        Args:
            method: HTTP method.
            url: Full URL from a KSeF API response.
            timeout: Optional custom timeout.

        Returns:
            Raw response bytes.

        Raises:
            APIError: If the server answers with an error status.
            NetworkError: If the request fails.
        """
        client = self._require_client()
        try:
            response = await client.request(
                method=method,
                url=url,
                timeout=timeout or self._config.receipt_download_timeout,
            )
        except httpx.TransportError as e:
            msg = f"Download failed: {type(e).__name__}"
            raise NetworkError(msg) from e

        if response.is_error:
            self._raise_api_error(response, "<download>")
        return response.content

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        token: str | None = None,
        accept: str | None = None,
    ) -> httpx.Response:
        client = self._require_client()

        headers = {}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        if accept is not None:
            headers["Accept"] = accept

        logger.debug(
            "API request",
            method=method,
            endpoint=endpoint,
            authenticated=token is not None,
            body=sanitize_for_log(json) if json is not None else None,
        )

        try:
            response = await client.request(
                method=method,
                url=endpoint,
                json=json,
                params=params,
                headers=headers,
            )
        except httpx.TransportError as e:
            msg = f"Request to {endpoint} failed: {type(e).__name__}"
            raise NetworkError(msg, endpoint=endpoint) from e

        if response.is_error:
            self._raise_api_error(response, endpoint)
        return response

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "HTTP client not initialized. Use 'async with' first."
            raise RuntimeError(msg)
        return self._client

    @staticmethod
    def _raise_api_error(response: httpx.Response, endpoint: str) -> None:
        status = response.status_code
        try:
            data = response.json() if response.content else None
        except ValueError:
            data = None
        error_msg = extract_error_message(data, response.reason_phrase or "Unknown error")

        logger.debug("API error", endpoint=endpoint, status=status, error=error_msg)

        if status == httpx.codes.UNAUTHORIZED:
            raise UnauthorizedError(error_msg, endpoint=endpoint)
        if status == httpx.codes.NOT_FOUND:
            raise NotFoundError(error_msg, endpoint=endpoint)
        if status == httpx.codes.TOO_MANY_REQUESTS:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                error_msg,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                endpoint=endpoint,
            )
        if status >= httpx.codes.INTERNAL_SERVER_ERROR:
            raise ServerError(error_msg, code=status, endpoint=endpoint)

        msg = f"{error_msg} (status={status})"
        raise APIError(msg, code=status, endpoint=endpoint)
