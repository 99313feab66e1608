import os

import pytest


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    missing = not (os.getenv("KSEF_TEST_TOKEN") and os.getenv("KSEF_TEST_NIP"))
    if not missing:
        return
    mark_expr = getattr(config.option, "markexpr", "")
    if "integration" in mark_expr:
        return
    skip = pytest.mark.skip(reason="KSEF_TEST_TOKEN / KSEF_TEST_NIP not set")
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def ksef_credentials() -> tuple[str, str]:
    token = os.getenv("KSEF_TEST_TOKEN")
    nip = os.getenv("KSEF_TEST_NIP")
    if not token or not nip:
        pytest.fail("KSEF_TEST_TOKEN and KSEF_TEST_NIP must be set to run integration tests.")
    return token, nip
