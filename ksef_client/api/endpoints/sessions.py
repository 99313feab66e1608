"""Online session and invoice submission endpoints."""

from typing import Any

from ksef_client.api.endpoints.common import parse_datetime, parse_status, parsing_response
from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.models.invoice import DocumentStatus
from ksef_client.models.session import FormCode


async def open_online_session(
    http: AsyncHttpClient,
    access_token: str,
    form_code: FormCode,
    encrypted_symmetric_key: str,
    initialization_vector: str,
) -> str:
    """
    Open an online session.

    Args:
        http: Configured async HTTP client.
        access_token: Bearer access token.
        form_code: Schema of the invoices sent in the session.
        encrypted_symmetric_key: Base64 RSA-OAEP ciphertext of the AES key.
        initialization_vector: Base64 AES IV.

    Returns:
        Session reference number.
    """
    response = await http.request(
        "POST",
        "/sessions/online",
        json={
            "formCode": form_code.to_dict(),
            "encryption": {
                "encryptedSymmetricKey": encrypted_symmetric_key,
                "initializationVector": initialization_vector,
            },
        },
        token=access_token,
    )
    with parsing_response("/sessions/online"):
        return response["referenceNumber"]


async def close_online_session(
    http: AsyncHttpClient, access_token: str, session_reference: str
) -> None:
    """Close an online session; the server's answer carries nothing the client needs."""
    await http.request_no_content(
        "POST",
        f"/sessions/online/{session_reference}/close",
        json={},
        token=access_token,
    )


async def send_invoice(
    http: AsyncHttpClient,
    access_token: str,
    session_reference: str,
    payload: dict[str, Any],
) -> str:
    """
    Send an encrypted invoice in an online session.

    Args:
        http: Configured async HTTP client.
        access_token: Bearer access token.
        session_reference: Open session reference.
        payload: Hashes, sizes, encrypted content and offline flag.

    Returns:
        Invoice reference number.
    """
    response = await http.request(
        "POST",
        f"/sessions/online/{session_reference}/invoices",
        json=payload,
        token=access_token,
    )
    with parsing_response(f"/sessions/online/{session_reference}/invoices"):
        return response["referenceNumber"]


async def get_invoice_status(
    http: AsyncHttpClient,
    access_token: str,
    session_reference: str,
    invoice_reference: str,
) -> DocumentStatus:
    """Get the status of an invoice sent in a session."""
    endpoint = f"/sessions/{session_reference}/invoices/{invoice_reference}"
    response = await http.request("GET", endpoint, token=access_token)
    with parsing_response(endpoint):
        code, description, details = parse_status(response)
        return DocumentStatus(
            reference_number=response.get("referenceNumber", invoice_reference),
            code=code,
            description=description,
            details=details,
            ksef_number=response.get("ksefNumber"),
            invoice_number=response.get("invoiceNumber"),
            upo_download_url=response.get("upoDownloadUrl"),
            acquisition_date=parse_datetime(response.get("acquisitionDate")),
        )
