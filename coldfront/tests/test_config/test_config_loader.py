"""Tests for config loading and get/set."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from coldfront.config.loader import (
    config_hash,
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from coldfront.config.schema import AppConfig, LocationConfig, NotifyMode, Units


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.location.name == "Boulder"
        assert config.location.lat == 40.01
        assert config.notify.mode == NotifyMode.DRY_RUN

    def test_defaults_fill_missing_sections(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.openweather.units == Units.IMPERIAL
        assert config.ops.check_interval_minutes == 180

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == AppConfig()

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        assert load_config(tmp_path / "nope.yaml") == AppConfig()

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("location:\n  name: x\n  altitude: 5\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_repo_default_config_is_valid(self):
        path = Path(__file__).parents[3] / "ops" / "configs" / "default.yaml"
        config = load_config(path)
        assert config.location.name == "New York City"

    def test_save_round_trip(self, tmp_path: Path):
        config = set_config_value(AppConfig(), "location.name", "Duluth")
        path = tmp_path / "out" / "config.yaml"
        save_config(config, path)
        assert load_config(path).location.name == "Duluth"


class TestSchema:
    def test_latitude_bounds(self):
        with pytest.raises(ValidationError):
            LocationConfig(lat=91.0)

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            LocationConfig(timezone="Not/AZone")

    def test_no_timezone_means_host_local(self):
        assert LocationConfig().tzinfo() is None

    def test_notify_mode(self):
        config = AppConfig(notify={"mode": "pushbullet"})
        assert config.notify.mode == NotifyMode.PUSHBULLET


class TestConfigHash:
    def test_deterministic(self):
        assert config_hash(AppConfig()) == config_hash(AppConfig())

    def test_changes_with_config(self):
        other = set_config_value(AppConfig(), "location.lat", "10")
        assert config_hash(AppConfig()) != config_hash(other)


class TestGetSetConfigValue:
    def test_dotted_key(self, default_config: AppConfig):
        assert get_config_value(default_config, "ops.check_interval_minutes") == 180

    def test_invalid_key(self, default_config: AppConfig):
        with pytest.raises(KeyError):
            get_config_value(default_config, "nonexistent.key")

    def test_string_coercion(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "ops.check_interval_minutes", "60")
        assert new_config.ops.check_interval_minutes == 60
        new_config = set_config_value(default_config, "location.lon", "-105.5")
        assert new_config.location.lon == -105.5

    def test_returns_new_instance(self, default_config: AppConfig):
        set_config_value(default_config, "location.name", "Elsewhere")
        assert default_config.location.name == "Home"

    def test_invalid_value_raises(self, default_config: AppConfig):
        with pytest.raises(ValidationError):
            set_config_value(default_config, "ops.check_interval_minutes", "0")

    def test_unknown_leaf_raises(self, default_config: AppConfig):
        with pytest.raises(KeyError):
            set_config_value(default_config, "location.altitude", "5")
