"""Pytest configuration and fixtures for kv_engine tests."""

from __future__ import annotations

import errno
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from kv_engine.adapters.outbound import FileLogStore
from kv_engine.infrastructure.config import Config, StorageConfig
from kv_engine.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def log_path(temp_dir: Path) -> Path:
    """Provide a path for a log file that does not exist yet."""
    return temp_dir / "data.log"


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration."""
    return Config(
        storage=StorageConfig(
            sync_mode="none",  # Faster for tests
            truncate_torn_tail=True,
        ),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


class TornWriteFile:
    """Log file wrapper whose write() stores part of the data, then fails.

    Every other attribute is delegated to the wrapped file.
    """

    def __init__(self, wrapped: Any, failures: int = 1) -> None:
        self._wrapped = wrapped
        self.failures = failures

    def write(self, data: bytes) -> int:
        if self.failures > 0:
            self.failures -= 1
            self._wrapped.write(bytes(data[: len(data) // 2]))
            raise OSError(errno.ENOSPC, "No space left on device")
        return self._wrapped.write(data)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._wrapped, name)


@pytest.fixture
def torn_writes() -> Callable[..., TornWriteFile]:
    """Make a log store's next append(s) write half the record, then fail."""

    def install(log_store: FileLogStore, failures: int = 1) -> TornWriteFile:
        wrapper = TornWriteFile(log_store._file, failures)
        log_store._file = wrapper
        return wrapper

    return install


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "chaos: Chaos/fault injection tests")
    config.addinivalue_line("markers", "slow: Slow tests")
