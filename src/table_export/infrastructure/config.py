"""Configuration management for the table export engine."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Storage layout configuration shared with the paging layer."""

    block_capacity: int = Field(
        default=8192, ge=1, le=1 << 20, description="Rows per storage block"
    )

    @field_validator("block_capacity")
    @classmethod
    def check_power_of_two(cls, v: int) -> int:
        """Block capacity must be a power of two."""
        if v & (v - 1):
            raise ValueError(f"block_capacity must be a power of two, got {v}")
        return v


class ExportConfig(BaseModel):
    """Export output configuration."""

    parquet_compression: Literal["none", "snappy", "gzip", "zstd", "lz4", "brotli"] = Field(
        default="none", description="Parquet column chunk compression codec"
    )
    create_parent_dirs: bool = Field(
        default=True, description="Create the parent directory of the target path"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="table_export", description="Service name for tracing")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class Config(BaseSettings):
    """Main configuration for the table export engine."""

    model_config = SettingsConfigDict(
        env_prefix="TABLE_EXPORT_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
