import pytest

from ksef_client.config import KsefConfig


def test_defaults_target_test_environment() -> None:
    config = KsefConfig()

    assert config.api_url == "https://api-test.ksef.mf.gov.pl/v2"
    assert config.auth_poll_max_attempts == 10
    assert config.auth_poll_interval == 2.0
    assert config.status_poll_max_attempts == 10
    assert config.status_poll_interval == 2.0


def test_config_is_immutable() -> None:
    config = KsefConfig()

    with pytest.raises(AttributeError):
        config.timeout = 5.0  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides",
    [
        {"api_url": ""},
        {"timeout": 0},
        {"receipt_download_timeout": -1},
        {"auth_poll_max_attempts": 0},
        {"status_poll_max_attempts": -3},
        {"auth_poll_interval": -0.5},
        {"status_poll_interval": -1},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValueError):
        KsefConfig(**overrides)


def test_zero_poll_interval_is_allowed() -> None:
    config = KsefConfig(auth_poll_interval=0, status_poll_interval=0)

    assert config.auth_poll_interval == 0


def test_from_env_reads_prefixed_variables() -> None:
    config = KsefConfig.from_env(
        {
            "KSEF_API_URL": "https://api.ksef.mf.gov.pl/v2",
            "KSEF_TIMEOUT": "12.5",
            "KSEF_AUTH_POLL_MAX_ATTEMPTS": "4",
            "KSEF_STATUS_POLL_INTERVAL": "0.25",
        }
    )

    assert config.api_url == "https://api.ksef.mf.gov.pl/v2"
    assert config.timeout == 12.5
    assert config.auth_poll_max_attempts == 4
    assert config.status_poll_interval == 0.25
    assert config.status_poll_max_attempts == 10


def test_from_env_skips_empty_values() -> None:
    config = KsefConfig.from_env({"KSEF_TIMEOUT": "", "KSEF_API_URL": ""})

    assert config == KsefConfig()


def test_from_env_rejects_unparsable_values() -> None:
    with pytest.raises(ValueError):
        KsefConfig.from_env({"KSEF_AUTH_POLL_MAX_ATTEMPTS": "many"})


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KSEF_STATUS_POLL_MAX_ATTEMPTS", "3")

    config = KsefConfig.from_env()

    assert config.status_poll_max_attempts == 3
