from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives.asymmetric import rsa

from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.config import KsefConfig
from ksef_client.models.crypto import CertificateUsage
from ksef_client.tests.utils.certificates import (
    certificate_entry,
    make_certificate_b64,
    make_rsa_key,
)
from ksef_client.tests.utils.fake_ksef import KSEF_TOKEN, FakeKsefTransport


@pytest.fixture(scope="session")
def token_private_key() -> rsa.RSAPrivateKey:
    return make_rsa_key()


@pytest.fixture(scope="session")
def symmetric_private_key() -> rsa.RSAPrivateKey:
    return make_rsa_key()


@pytest.fixture(scope="session")
def token_certificate_b64(token_private_key: rsa.RSAPrivateKey) -> str:
    return make_certificate_b64(token_private_key, "KsefTokenEncryption")


@pytest.fixture(scope="session")
def symmetric_certificate_b64(symmetric_private_key: rsa.RSAPrivateKey) -> str:
    return make_certificate_b64(symmetric_private_key, "SymmetricKeyEncryption")


@pytest.fixture
def certificate_catalog(
    token_certificate_b64: str, symmetric_certificate_b64: str
) -> list[dict]:
    return [
        certificate_entry(symmetric_certificate_b64, CertificateUsage.SYMMETRIC_KEY_ENCRYPTION),
        certificate_entry(token_certificate_b64, CertificateUsage.KSEF_TOKEN_ENCRYPTION),
    ]


@pytest.fixture
def recording_sleep() -> Callable:
    """Async sleep replacement that records requested delays."""
    delays: list[float] = []

    async def _sleep(delay: float) -> None:
        delays.append(delay)

    _sleep.delays = delays
    return _sleep


@pytest.fixture
def make_transport(
    certificate_catalog: list[dict],
    token_private_key: rsa.RSAPrivateKey,
    symmetric_private_key: rsa.RSAPrivateKey,
) -> Callable[..., FakeKsefTransport]:
    def _make(**kwargs: Any) -> FakeKsefTransport:
        kwargs.setdefault("catalog", certificate_catalog)
        kwargs.setdefault("ksef_token", KSEF_TOKEN)
        return FakeKsefTransport(
            token_private_key=token_private_key,
            symmetric_private_key=symmetric_private_key,
            **kwargs,
        )

    return _make


@pytest.fixture
def transport(make_transport: Callable[..., FakeKsefTransport]) -> FakeKsefTransport:
    return make_transport()


@pytest.fixture
def config() -> KsefConfig:
    return KsefConfig()


@pytest_asyncio.fixture
async def http(config: KsefConfig, transport: FakeKsefTransport) -> AsyncIterator[AsyncHttpClient]:
    async with AsyncHttpClient(config, transport=transport) as client:
        yield client
