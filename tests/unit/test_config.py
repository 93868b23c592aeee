"""Tests for configuration."""

import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("UI_SELECTION_DELAY", "UI_LOG_LEVEL", "UI_PORT", "UI_ENABLE_METRICS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.unit
def test_defaults(clean_env):
    settings = Settings(_env_file=None)

    assert settings.host == "127.0.0.1"
    assert settings.port == 8050
    assert settings.log_level == "INFO"
    assert settings.json_logs is False
    assert settings.session_cache_size == 256
    assert settings.session_ttl == 1800
    assert settings.selection_delay == 0.3
    assert settings.max_schema_depth == 40
    assert settings.enable_metrics is True


@pytest.mark.unit
def test_environment_overrides(clean_env):
    clean_env.setenv("UI_PORT", "9000")
    clean_env.setenv("ui_enable_metrics", "false")

    settings = Settings(_env_file=None)

    assert settings.port == 9000
    assert settings.enable_metrics is False


@pytest.mark.unit
@pytest.mark.parametrize("kwargs", [
    {"port": 0},
    {"port": 70000},
    {"selection_delay": -1},
    {"selection_delay": 6},
    {"session_cache_size": 0},
])
def test_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **kwargs)


@pytest.mark.unit
def test_get_settings_is_cached():
    assert get_settings() is get_settings()
