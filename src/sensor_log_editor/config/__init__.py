"""Configuration management for SensorLogEditor."""

from .settings import (
    AppConfig,
    ConfigManager,
    ExportConfig,
    ImportConfig,
    ViewConfig,
    get_config,
    get_config_manager,
)

__all__ = [
    "AppConfig",
    "ConfigManager",
    "ImportConfig",
    "ViewConfig",
    "ExportConfig",
    "get_config",
    "get_config_manager",
]
