"""Configuration management for SensorLogEditor.

Uses attrs with validators for type-safe, validated configuration.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import attrs
from attrs import define, field


def positive_int(instance, attribute, value):
    """Validator: ensure value is a positive integer."""
    if value <= 0:
        raise ValueError(f"{attribute.name} must be positive, got {value}")


def nonempty_str(instance, attribute, value):
    """Validator: ensure value is a non-empty string."""
    if not value:
        raise ValueError(f"{attribute.name} must not be empty")


@define
class ImportConfig:
    """Input file dialect."""

    delimiter: str = field(default=";", validator=[attrs.validators.instance_of(str), nonempty_str])
    # Column-title line marking the end of the header (matched case-insensitively)
    data_header_token: str = field(default="TimeStamp", validator=[attrs.validators.instance_of(str), nonempty_str])
    # utf-8-sig strips a leading BOM when present
    encoding: str = field(default="utf-8-sig", validator=attrs.validators.instance_of(str))
    supported_extensions: list[str] = field(factory=lambda: [".txt"])


@define
class ViewConfig:
    """Point budgets and recompute timing for plotted windows."""

    # Points drawn per channel for the full series; scaled up as the user zooms in
    max_display_points: int = field(default=2000, validator=[attrs.validators.instance_of(int), positive_int])
    min_points_on_screen: int = field(default=100, validator=[attrs.validators.instance_of(int), positive_int])
    max_points_on_screen: int = field(default=1500, validator=[attrs.validators.instance_of(int), positive_int])
    debounce_ms: int = field(default=150, validator=[attrs.validators.instance_of(int), positive_int])

    @max_points_on_screen.validator
    def _check_points_order(self, attribute, value):
        """Ensure max_points_on_screen >= min_points_on_screen."""
        if value < self.min_points_on_screen:
            raise ValueError(
                f"max_points_on_screen ({value}) must be >= min_points_on_screen ({self.min_points_on_screen})"
            )


@define
class ExportConfig:
    """Output file naming and layout."""

    selection_suffix: str = field(default="_selection", validator=attrs.validators.instance_of(str))
    line_terminator: str = field(default="\r\n", validator=attrs.validators.in_(["\r\n", "\n"]))
    fallback_file_name: str = field(default="export.txt", validator=[attrs.validators.instance_of(str), nonempty_str])


@define
class AppConfig:
    """Main application configuration combining all sub-configs."""

    importing: ImportConfig = field(factory=ImportConfig)
    view: ViewConfig = field(factory=ViewConfig)
    export: ExportConfig = field(factory=ExportConfig)

    @classmethod
    def default(cls) -> AppConfig:
        """Create default configuration."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        """Create configuration from dictionary."""
        return cls(
            importing=ImportConfig(**data.get("importing", {})),
            view=ViewConfig(**data.get("view", {})),
            export=ExportConfig(**data.get("export", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return attrs.asdict(self)

    def save(self, filepath: str | Path) -> None:
        """Save configuration to JSON file."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str | Path) -> AppConfig:
        """Load configuration from JSON file."""
        with open(filepath) as f:
            data = json.load(f)
        return cls.from_dict(data)


class ConfigManager:
    """Manages application configuration with environment variable overrides."""

    def __init__(self, config_dir: str | Path | None = None):
        """Initialize config manager.

        Args:
            config_dir: Directory for config files. Defaults to ~/.sensor_log_editor/
        """
        if config_dir is None:
            config_dir = Path.home() / ".sensor_log_editor"
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.user_config_path = self.config_dir / "user_config.json"
        self.default_config_path = self.config_dir / "default_config.json"

        self._config: AppConfig | None = None

    def get_config(self) -> AppConfig:
        """Get current configuration with environment variable overrides."""
        if self._config is None:
            self._config = self._load_config()
            self._apply_env_overrides()
        return self._config

    def _load_config(self) -> AppConfig:
        """Load configuration from user or default file."""
        if self.user_config_path.exists():
            return AppConfig.load(self.user_config_path)

        if self.default_config_path.exists():
            return AppConfig.load(self.default_config_path)

        config = AppConfig.default()
        config.save(self.default_config_path)
        return config

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to config.

        Environment variables like SLE_MAX_DISPLAY_POINTS=4000 override config.view.max_display_points
        """
        if self._config is None:
            return

        env_prefix = "SLE_"

        # View overrides
        for attr in ["max_display_points", "min_points_on_screen", "max_points_on_screen", "debounce_ms"]:
            env_var = f"{env_prefix}{attr.upper()}"
            if env_var in os.environ:
                setattr(self._config.view, attr, int(os.environ[env_var]))

        # Import overrides
        for attr in ["delimiter", "encoding"]:
            env_var = f"{env_prefix}{attr.upper()}"
            if env_var in os.environ:
                setattr(self._config.importing, attr, os.environ[env_var])

    def save_user_config(self) -> None:
        """Save current configuration as user config."""
        if self._config is not None:
            self._config.save(self.user_config_path)

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self._config = AppConfig.default()
        if self.user_config_path.exists():
            self.user_config_path.unlink()


# Global singleton instance
_config_manager: ConfigManager | None = None


def get_config() -> AppConfig:
    """Get global configuration singleton.

    Returns:
        AppConfig instance with current settings.

    Example:
        >>> from sensor_log_editor.config.settings import get_config
        >>> config = get_config()
        >>> print(config.view.max_points_on_screen)
        1500
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.get_config()


def get_config_manager() -> ConfigManager:
    """Get global config manager singleton.

    Returns:
        ConfigManager instance for advanced config management.
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
