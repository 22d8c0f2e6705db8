"""Tests for configuration classes and the config manager."""
import pytest

from sensor_log_editor.config.settings import (
    AppConfig,
    ConfigManager,
    ExportConfig,
    ImportConfig,
    ViewConfig,
)


class TestConfigValidation:
    def test_defaults(self):
        config = AppConfig.default()
        assert config.importing.delimiter == ";"
        assert config.importing.data_header_token == "TimeStamp"
        assert config.view.max_display_points == 2000
        assert config.view.debounce_ms == 150
        assert config.export.line_terminator == "\r\n"

    def test_positive_ints(self):
        with pytest.raises(ValueError, match="must be positive"):
            ViewConfig(debounce_ms=0)

    def test_points_order(self):
        with pytest.raises(ValueError, match="must be >= min_points_on_screen"):
            ViewConfig(min_points_on_screen=500, max_points_on_screen=100)

    def test_empty_delimiter(self):
        with pytest.raises(ValueError, match="must not be empty"):
            ImportConfig(delimiter="")

    def test_line_terminator_choices(self):
        with pytest.raises(ValueError):
            ExportConfig(line_terminator="\r")


class TestAppConfigPersistence:
    def test_dict_round_trip(self):
        config = AppConfig(view=ViewConfig(max_display_points=4000))
        restored = AppConfig.from_dict(config.to_dict())
        assert restored == config

    def test_partial_dict(self):
        config = AppConfig.from_dict({"export": {"selection_suffix": "_part"}})
        assert config.export.selection_suffix == "_part"
        assert config.importing == ImportConfig()

    def test_save_load(self, tmp_path):
        path = tmp_path / "cfg" / "config.json"
        AppConfig(export=ExportConfig(line_terminator="\n")).save(path)
        assert AppConfig.load(path).export.line_terminator == "\n"


class TestConfigManager:
    def test_writes_default_config(self, tmp_path):
        manager = ConfigManager(tmp_path)
        config = manager.get_config()
        assert config == AppConfig.default()
        assert manager.default_config_path.exists()

    def test_user_config_preferred(self, tmp_path):
        AppConfig(view=ViewConfig(debounce_ms=300)).save(tmp_path / "user_config.json")
        assert ConfigManager(tmp_path).get_config().view.debounce_ms == 300

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SLE_MAX_DISPLAY_POINTS", "4000")
        monkeypatch.setenv("SLE_DELIMITER", ",")

        config = ConfigManager(tmp_path).get_config()

        assert config.view.max_display_points == 4000
        assert config.importing.delimiter == ","

    def test_reset_to_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path)
        manager.get_config().view.debounce_ms = 500
        manager.save_user_config()
        assert manager.user_config_path.exists()

        manager.reset_to_defaults()

        assert manager.get_config().view.debounce_ms == 150
        assert not manager.user_config_path.exists()
