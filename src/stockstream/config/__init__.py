"""Configuration module."""

from stockstream.config.settings import PipelineConfig, Settings, YahooConfig, load_settings

__all__ = ["PipelineConfig", "Settings", "YahooConfig", "load_settings"]
