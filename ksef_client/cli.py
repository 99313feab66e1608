"""
Command line demo: log in, send a minimal invoice, print its status and UPO locator.
"""

import asyncio
import json
import logging
import sys
import time

import click
import structlog

from ksef_client.client import KsefClient
from ksef_client.config import KsefConfig
from ksef_client.exceptions import KsefError
from ksef_client.invoice.template import create_minimal_invoice
from ksef_client.models.auth import ContextIdentifier

logger = structlog.get_logger(__name__)


def configure_logging(verbose: bool) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


async def run_demo(
    client: KsefClient, seller_nip: str, buyer_nip: str, invoice_number: str
) -> dict:
    """Run login -> open -> send -> close -> status and return a summary."""
    credential = await client.login()
    click.echo(f"Logged in, access token {credential.access_token[:12]}...")

    session = await client.open_session()
    click.echo(f"Session opened: {session.reference_number}")

    invoice_xml = create_minimal_invoice(seller_nip, buyer_nip, invoice_number)
    document = await client.send_invoice(invoice_xml)
    click.echo(f"Invoice sent: {document.reference_number}")

    session_reference = await client.close_session()
    click.echo("Session closed")

    status = await client.wait_for_invoice_status(document.reference_number, session_reference)
    click.echo(f"Invoice status: {status.code} {status.description}")

    return {
        "sessionReference": session_reference,
        "invoiceReference": document.reference_number,
        "state": str(status.state),
        "ksefNumber": status.ksef_number,
        "upoDownloadUrl": status.upo_download_url,
    }


@click.command()
@click.option("--token", envvar="KSEF_TOKEN", required=True, help="KSeF token.")
@click.option("--nip", envvar="KSEF_NIP", required=True, help="Seller NIP (auth context).")
@click.option("--buyer-nip", envvar="KSEF_BUYER_NIP", default="1234567890", show_default=True)
@click.option("--invoice-number", envvar="INVOICE_NUMBER", default=None)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(token: str, nip: str, buyer_nip: str, invoice_number: str | None, verbose: bool) -> None:
    """Send a minimal FA (3) invoice to KSeF and print its status."""
    configure_logging(verbose)

    invoice_number = invoice_number or f"FA/TEST/{int(time.time() * 1000)}"
    try:
        config = KsefConfig.from_env()
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    async def _run() -> dict:
        async with KsefClient(
            config,
            ksef_token=token,
            context_identifier=ContextIdentifier(value=nip),
        ) as client:
            return await run_demo(client, nip, buyer_nip, invoice_number)

    try:
        summary = asyncio.run(_run())
    except KsefError as e:
        logger.error("KSeF request failed", error=str(e), error_type=type(e).__name__)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(summary, indent=2))
    click.echo("The UPO URL is regenerated on every status request; query again for a fresh one.")


if __name__ == "__main__":
    main()
