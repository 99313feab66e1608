import pytest

from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.models.auth import Credential
from ksef_client.services.certificate_service import CertificateService
from ksef_client.tests.utils.fake_ksef import ACCESS_TOKEN, REFRESH_TOKEN


@pytest.fixture
def certificates(http: AsyncHttpClient) -> CertificateService:
    return CertificateService(http)


@pytest.fixture
def credential() -> Credential:
    return Credential(access_token=ACCESS_TOKEN, refresh_token=REFRESH_TOKEN)
