"""Configuration management for the key-value engine."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Log storage configuration."""

    sync_mode: Literal["fsync", "fdatasync", "none"] = Field(
        default="fsync", description="How appends are synced to stable storage"
    )
    truncate_torn_tail: bool = Field(
        default=True,
        description="Cut an incomplete trailing record found during recovery",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="kv_engine", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the key-value engine."""

    model_config = SettingsConfigDict(
        env_prefix="KV_ENGINE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
