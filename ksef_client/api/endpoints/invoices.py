"""Invoice retrieval endpoints."""

from ksef_client.api.http_client import AsyncHttpClient


async def get_invoice_xml(http: AsyncHttpClient, access_token: str, ksef_number: str) -> str:
    """Download the XML of an invoice by its KSeF number."""
    return await http.request_text(
        "GET",
        f"/invoices/ksef/{ksef_number}",
        token=access_token,
    )
