"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from notelens.config import Settings, get_settings, reload_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("NOTELENS_DEBOUNCE_MS", "NOTELENS_VAULT_URL", "NOTELENS_HIGHLIGHT_CACHE_SIZE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.debounce_ms == 100
    assert settings.debounce_seconds == pytest.approx(0.1)
    assert settings.highlight_cache_size == 100
    assert settings.highlight_ttl_seconds == 300.0
    assert settings.highlight_key_prefix == 100
    assert settings.vault_url == "http://localhost:8000"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTELENS_DEBOUNCE_MS", "250")
    monkeypatch.setenv("NOTELENS_VAULT_URL", "http://vault.internal:9000/")
    monkeypatch.setenv("NOTELENS_LOG_LEVEL", "debug")

    settings = reload_settings()

    assert settings.debounce_seconds == pytest.approx(0.25)
    assert settings.vault_url == "http://vault.internal:9000"
    assert settings.log_level == "DEBUG"


def test_get_settings_is_cached_until_reload(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("NOTELENS_SEARCH_LIMIT", "7")

    assert get_settings() is first
    assert reload_settings().search_limit == 7


@pytest.mark.parametrize(
    "field,value",
    [
        ("debounce_ms", -1),
        ("highlight_cache_size", 0),
        ("highlight_ttl_seconds", 0),
        ("vault_url", "  /"),
        ("log_level", "LOUD"),
    ],
)
def test_invalid_values_are_rejected(field: str, value: object) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_zero_debounce_is_allowed() -> None:
    assert Settings(_env_file=None, debounce_ms=0).debounce_seconds == 0.0
