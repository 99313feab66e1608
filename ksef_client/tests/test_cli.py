import json
from collections.abc import Iterator
from unittest.mock import AsyncMock, Mock, patch

import pytest
import structlog
from click.testing import CliRunner

from ksef_client.cli import main, run_demo
from ksef_client.exceptions import AuthenticationError, MalformedResponseError
from ksef_client.models.invoice import DocumentStatus


def make_mock_client() -> Mock:
    client = Mock()
    client.login = AsyncMock(return_value=Mock(access_token="access-token-123456"))
    client.open_session = AsyncMock(return_value=Mock(reference_number="20260108-SO-1"))
    client.send_invoice = AsyncMock(return_value=Mock(reference_number="20260108-EE-1"))
    client.close_session = AsyncMock(return_value="20260108-SO-1")
    client.wait_for_invoice_status = AsyncMock(
        return_value=DocumentStatus(
            reference_number="20260108-EE-1",
            code=200,
            description="Sukces",
            ksef_number="3343445677-20260108-0100E055554D-3C",
            upo_download_url="https://upo.example.test/1",
        )
    )
    return client


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """main() configures structlog globally; undo it for the other tests."""
    yield
    structlog.reset_defaults()


@pytest.mark.asyncio
async def test_run_demo_summarizes_flow() -> None:
    client = make_mock_client()

    summary = await run_demo(client, "3343445677", "1234567890", "FA/1/2026")

    assert summary == {
        "sessionReference": "20260108-SO-1",
        "invoiceReference": "20260108-EE-1",
        "state": "accepted",
        "ksefNumber": "3343445677-20260108-0100E055554D-3C",
        "upoDownloadUrl": "https://upo.example.test/1",
    }
    sent_xml = client.send_invoice.call_args.args[0]
    assert "FA/1/2026" in sent_xml
    client.wait_for_invoice_status.assert_called_once_with("20260108-EE-1", "20260108-SO-1")


def test_main_requires_token() -> None:
    result = CliRunner().invoke(main, ["--nip", "3343445677"], env={"KSEF_TOKEN": None})

    assert result.exit_code != 0
    assert "token" in result.output.lower()


def test_main_prints_summary() -> None:
    summary = {"sessionReference": "20260108-SO-1", "state": "accepted"}

    with patch("ksef_client.cli.run_demo", AsyncMock(return_value=summary)) as mock_run:
        result = CliRunner().invoke(
            main, ["--token", "t", "--nip", "3343445677", "--invoice-number", "FA/9"]
        )

    assert result.exit_code == 0, result.output
    assert mock_run.call_args.args[1:] == ("3343445677", "1234567890", "FA/9")
    printed = result.output[result.output.index("{") : result.output.rindex("}") + 1]
    assert json.loads(printed) == summary


def test_main_exits_with_error_on_ksef_failure() -> None:
    failure = AsyncMock(side_effect=AuthenticationError("Invalid token", code=450))

    with patch("ksef_client.cli.run_demo", failure):
        result = CliRunner().invoke(main, ["--token", "t", "--nip", "3343445677"])

    assert result.exit_code == 1
    assert "Invalid token" in result.output


def test_main_rejects_bad_environment_config() -> None:
    result = CliRunner().invoke(
        main, ["--token", "t", "--nip", "3343445677"], env={"KSEF_TIMEOUT": "soon"}
    )

    assert result.exit_code != 0
    assert "Invalid value" in result.output


def test_main_reports_malformed_response() -> None:
    failure = AsyncMock(
        side_effect=MalformedResponseError(
            "Response is missing field 'referenceNumber'", endpoint="/sessions/online"
        )
    )

    with patch("ksef_client.cli.run_demo", failure):
        result = CliRunner().invoke(main, ["--token", "t", "--nip", "3343445677"])

    assert result.exit_code == 1
    assert "referenceNumber" in result.output
