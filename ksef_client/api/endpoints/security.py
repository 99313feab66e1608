"""Public key certificate endpoint."""

from typing import Any

from ksef_client.api.endpoints.common import parsing_response
from ksef_client.api.http_client import AsyncHttpClient


async def get_public_key_certificates(http: AsyncHttpClient) -> list[dict[str, Any]]:
    """
    Get the catalog of KSeF public key certificates.

    Args:
        http: Configured async HTTP client.

    Returns:
        Entries with ``certificate`` (base64 DER), ``usage`` list and validity dates.
    """
    endpoint = "/security/public-key-certificates"
    response = await http.request("GET", endpoint)
    if isinstance(response, dict):
        response = response.get("certificates", [])
    with parsing_response(endpoint):
        return [dict(entry) for entry in response]
