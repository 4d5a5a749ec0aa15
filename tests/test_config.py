"""Tests for environment-driven configuration."""

import pytest

from konane.config import (
    DEFAULT_PROTOCOL_TIMEOUT_MS,
    DEFAULT_TIME_GRACE_MS,
    KonaneConfig,
    get_config,
    load_config,
)


class TestLoadConfig:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "WHITE_PORT", "BLACK_PORT", "PROTOCOL_TIMEOUT_MS", "TIME_GRACE_MS", "VERBOSE", "LOG_LEVEL"
        ):
            monkeypatch.delenv(f"KONANE_{name}", raising=False)
        config = load_config()
        assert config.white_port == 2222
        assert config.black_port == 2223
        assert config.protocol_timeout_ms == DEFAULT_PROTOCOL_TIMEOUT_MS == 22222
        assert config.time_grace_ms == DEFAULT_TIME_GRACE_MS == 250
        assert not config.verbose
        assert config.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KONANE_WHITE_PORT", "3000")
        monkeypatch.setenv("KONANE_PROTOCOL_TIMEOUT_MS", "500")
        monkeypatch.setenv("KONANE_VERBOSE", "yes")
        monkeypatch.setenv("KONANE_LOG_LEVEL", "debug")
        config = load_config()
        assert config.white_port == 3000
        assert config.protocol_timeout_ms == 500
        assert config.verbose
        assert config.log_level == "DEBUG"

    def test_bad_integer_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KONANE_BLACK_PORT", "many")
        assert load_config().black_port == 2223

    def test_get_config_is_cached(self) -> None:
        assert get_config() is get_config()


class TestOverrides:
    def test_none_values_ignored(self) -> None:
        config = KonaneConfig()
        assert config.with_overrides(white_port=None) is config

    def test_values_applied(self) -> None:
        config = KonaneConfig().with_overrides(protocol_timeout_ms=100, verbose=True)
        assert config.protocol_timeout_ms == 100
        assert config.verbose
        assert config.white_port == 2222
