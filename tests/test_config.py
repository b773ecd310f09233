"""Tests for MixerConfig loading."""

import json

import pytest

from scarlettmix.exceptions import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from scarlettmix.models import MixerConfig


@pytest.mark.unit
class TestMixerConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = MixerConfig()
        assert config.device == "hw:2"
        assert config.autodetect is True
        assert config.verbose == 0
        assert config.poll_interval == 0.05

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            MixerConfig(poll_interval=0)
        with pytest.raises(ValueError):
            MixerConfig(verbose=-1)
        with pytest.raises(ValueError):
            MixerConfig(device="")


@pytest.mark.unit
class TestLoad:
    """Reading configuration files."""

    def test_load(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"device": "hw:USB", "autodetect": False}))

        config = MixerConfig.load(path)

        assert config.device == "hw:USB"
        assert config.autodetect is False
        assert config.poll_interval == 0.05

    def test_load_is_read_only(self, temp_dir):
        path = temp_dir / "config.json"
        text = json.dumps({"device": "hw:1"})
        path.write_text(text)

        MixerConfig.load(path)

        assert path.read_text() == text

    def test_trailing_comma(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text('{\n  "device": "hw:1",\n}')

        with pytest.raises(ConfigFileInvalidError) as exc_info:
            MixerConfig.load(path)

        assert exc_info.value.user_message == "Configuration file has a trailing comma"
        assert str(path) in exc_info.value.recovery_hint

    def test_invalid_value(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"poll_interval": 10}))

        with pytest.raises(ConfigValidationError) as exc_info:
            MixerConfig.load(path)

        assert exc_info.value.field == "poll_interval"
        assert "seconds" in exc_info.value.recovery_hint

    def test_several_invalid_values(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"poll_interval": 10, "verbose": -2}))

        with pytest.raises(ConfigValidationError) as exc_info:
            MixerConfig.load(path)

        assert exc_info.value.field == "multiple fields"

    def test_unreadable(self, temp_dir):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            MixerConfig.load(temp_dir)


@pytest.mark.unit
class TestLoadOrDefault:
    """Config file plus command-line overrides."""

    def test_missing_file_gives_defaults(self, temp_dir):
        config = MixerConfig.load_or_default(temp_dir / "missing.json")
        assert config == MixerConfig()

    def test_overrides(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"device": "hw:1", "poll_interval": 0.2}))

        config = MixerConfig.load_or_default(path, device="hw:3", autodetect=None)

        assert config.device == "hw:3"
        assert config.autodetect is True
        assert config.poll_interval == 0.2

    def test_invalid_override(self, temp_dir):
        with pytest.raises(ConfigValidationError):
            MixerConfig.load_or_default(temp_dir / "missing.json", verbose=-1)

    def test_fields_set_tracks_file_and_overrides(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"poll_interval": 0.2}))

        config = MixerConfig.load_or_default(path, verbose=2)

        assert config.model_fields_set == {"poll_interval", "verbose"}
        assert "device" not in config.model_fields_set

    def test_device_from_file_counts_as_set(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"device": "hw:9"}))

        config = MixerConfig.load_or_default(path)

        assert config.device == "hw:9"
        assert "device" in config.model_fields_set
