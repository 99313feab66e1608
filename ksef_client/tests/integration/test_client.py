import time

import pytest

from ksef_client.client import KsefClient
from ksef_client.config import KsefConfig
from ksef_client.invoice.template import create_minimal_invoice
from ksef_client.models.auth import ContextIdentifier
from ksef_client.models.invoice import DocumentState

pytestmark = pytest.mark.integration


def make_client(credentials: tuple[str, str]) -> KsefClient:
    token, nip = credentials
    return KsefClient(
        KsefConfig.from_env(),
        ksef_token=token,
        context_identifier=ContextIdentifier(value=nip),
    )


@pytest.mark.asyncio
async def test_login_and_refresh(ksef_credentials: tuple[str, str]) -> None:
    async with make_client(ksef_credentials) as client:
        credential = await client.login()
        refreshed = await client.refresh()

    assert credential.access_token
    assert refreshed.access_token


@pytest.mark.asyncio
async def test_send_minimal_invoice(ksef_credentials: tuple[str, str]) -> None:
    _, nip = ksef_credentials
    invoice_xml = create_minimal_invoice(nip, "1234567890", f"FA/IT/{int(time.time() * 1000)}")

    async with make_client(ksef_credentials) as client:
        await client.login()
        await client.open_session()
        document = await client.send_invoice(invoice_xml)
        session_reference = await client.close_session()
        status = await client.wait_for_invoice_status(document.reference_number, session_reference)

        assert status.state.is_terminal
        if status.state is DocumentState.ACCEPTED:
            fresh = await client.check_invoice_status(document.reference_number, session_reference)
            receipt = await client.download_receipt(fresh.upo_download_url)
            assert receipt
