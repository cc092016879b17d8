"""Unit tests for configuration module."""

from __future__ import annotations

import pytest

from kv_engine.infrastructure.config import (
    Config,
    ObservabilityConfig,
    StorageConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.storage.sync_mode == "fsync"
        assert config.storage.truncate_torn_tail is True
        assert config.observability.log_level == "INFO"
        assert config.observability.log_format == "json"
        assert config.observability.metrics_port == 8001
        assert config.observability.otel_service_name == "kv_engine"

    def test_custom_storage_config(self, test_config: Config) -> None:
        """Test custom storage configuration."""
        assert test_config.storage.sync_mode == "none"

    def test_sync_modes(self) -> None:
        """Test valid sync modes."""
        for mode in ["fsync", "fdatasync", "none"]:
            storage = StorageConfig(sync_mode=mode)  # type: ignore
            assert storage.sync_mode == mode

    def test_invalid_sync_mode(self) -> None:
        """Test that an unknown sync mode raises validation error."""
        with pytest.raises(ValueError):
            StorageConfig(sync_mode="sometimes")  # type: ignore

    def test_invalid_metrics_port(self) -> None:
        """Test that an out-of-range port raises validation error."""
        with pytest.raises(ValueError):
            ObservabilityConfig(metrics_port=70000)

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested settings can be overridden from the environment."""
        monkeypatch.setenv("KV_ENGINE_STORAGE__SYNC_MODE", "fdatasync")
        monkeypatch.setenv("KV_ENGINE_STORAGE__TRUNCATE_TORN_TAIL", "false")
        monkeypatch.setenv("KV_ENGINE_OBSERVABILITY__LOG_LEVEL", "DEBUG")

        config = Config()

        assert config.storage.sync_mode == "fdatasync"
        assert config.storage.truncate_torn_tail is False
        assert config.observability.log_level == "DEBUG"


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
