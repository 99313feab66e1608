from unittest.mock import AsyncMock, Mock

import pytest

from ksef_client.api.endpoints.security import get_public_key_certificates
from ksef_client.exceptions import MalformedResponseError

ENTRY = {"certificate": "MIIB", "usage": ["KsefTokenEncryption"]}


@pytest.mark.asyncio
async def test_get_certificates_is_unauthenticated(mock_http: Mock) -> None:
    mock_http.request = AsyncMock(return_value=[ENTRY])

    result = await get_public_key_certificates(mock_http)

    mock_http.request.assert_called_once_with("GET", "/security/public-key-certificates")
    assert result == [ENTRY]


@pytest.mark.asyncio
async def test_get_certificates_unwraps_object_response(mock_http: Mock) -> None:
    mock_http.request = AsyncMock(return_value={"certificates": [ENTRY]})

    assert await get_public_key_certificates(mock_http) == [ENTRY]


@pytest.mark.asyncio
async def test_get_certificates_rejects_non_object_entries(mock_http: Mock) -> None:
    mock_http.request = AsyncMock(return_value=["MIIB"])

    with pytest.raises(MalformedResponseError) as exc_info:
        await get_public_key_certificates(mock_http)

    assert exc_info.value.endpoint == "/security/public-key-certificates"
