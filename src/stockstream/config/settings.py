"""Application settings with Pydantic validation."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineConfig(BaseSettings):
    """Fetch-compute-emit pipeline configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STOCKSTREAM_PIPELINE_",
        extra="ignore",
    )

    window_size: int = Field(default=30, description="Samples per moving-average window")
    sink_capacity: int = Field(default=100, description="Result sink capacity")
    refresh_interval: float = Field(
        default=30.0, description="Seconds between cycles in watch mode"
    )
    fetch_timeout: float | None = Field(
        default=None, description="Per-symbol fetch timeout in seconds"
    )

    @field_validator(
        "window_size",
        "sink_capacity",
        "refresh_interval",
        "fetch_timeout",
        mode="after",
    )
    @classmethod
    def validate_positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("Value must be positive")
        return v


class YahooConfig(BaseSettings):
    """Yahoo Finance quote source configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STOCKSTREAM_YAHOO_",
        extra="ignore",
    )

    base_url: str = Field(default="https://query1.finance.yahoo.com")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    adjusted: bool = Field(default=True, description="Use adjusted closes")
    user_agent: str = Field(
        default="Mozilla/5.0 (X11; Linux x86_64) stockstream/0.1"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="STOCKSTREAM_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = Field(default="stockstream")
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    symbols: str = Field(default="AAPL,MSFT,UBER,GOOG")
    timestamp_format: Literal["iso", "unix"] = Field(default="iso")

    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    yahoo: YahooConfig = Field(default_factory=YahooConfig)


def load_settings() -> Settings:
    """Load settings from environment."""
    return Settings()
