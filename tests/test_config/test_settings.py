"""Tests for Settings.from_env()."""

import pytest

from p4relay.config.settings import Settings

ENV_KEYS = [
    "P4PORT",
    "P4USER",
    "P4CLIENT",
    "P4RELAY_P4PORT",
    "P4RELAY_P4USER",
    "P4RELAY_P4CLIENT",
    "P4RELAY_RETRIES",
    "P4RELAY_REFRESH_THRESHOLD",
    "P4RELAY_RETRY_DELAY",
    "P4RELAY_SSH_HOST",
    "P4RELAY_LOG_COLORS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env()

    assert settings.p4port == "perforce:1666"
    assert settings.command_retries == 10
    assert settings.refresh_threshold == 100
    assert settings.retry_delay == 5.0
    assert settings.ssh_host == "localhost"


def test_reads_standard_perforce_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("P4PORT", "ssl:perforce:1666")
    monkeypatch.setenv("P4USER", "alice")
    monkeypatch.setenv("P4CLIENT", "alice-ws")

    settings = Settings.from_env()

    assert settings.p4port == "ssl:perforce:1666"
    assert settings.p4user == "alice"
    assert settings.p4client == "alice-ws"


def test_prefixed_variables_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("P4PORT", "perforce:1666")
    monkeypatch.setenv("P4RELAY_P4PORT", "ssl:edge:1666")

    assert Settings.from_env().p4port == "ssl:edge:1666"


def test_retry_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("P4RELAY_RETRIES", "3")
    monkeypatch.setenv("P4RELAY_REFRESH_THRESHOLD", "250")
    monkeypatch.setenv("P4RELAY_RETRY_DELAY", "0.5")

    settings = Settings.from_env()

    assert settings.command_retries == 3
    assert settings.refresh_threshold == 250
    assert settings.retry_delay == 0.5


def test_invalid_numbers_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("P4RELAY_RETRIES", "lots")
    monkeypatch.setenv("P4RELAY_RETRY_DELAY", "soon")

    settings = Settings.from_env()

    assert settings.command_retries == 10
    assert settings.retry_delay == 5.0


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("1", True), ("on", True), ("false", False), ("no", False)],
)
def test_bool_parsing(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("P4RELAY_LOG_COLORS", value)

    assert Settings.from_env().log_colors is expected
