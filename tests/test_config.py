"""Tests for tracker configuration."""

import json

import pytest

from live2d_head_pose.core.config import TrackerConfig
from live2d_head_pose.core.errors import ConfigError, HeadPoseError


class TestTrackerConfig:
    def test_defaults(self):
        config = TrackerConfig()
        assert config.norm_width == 200.0
        assert config.norm_height == 200.0
        assert config.position_low_pass == 4.0
        assert config.rotation_low_pass == 2.0
        assert config.interpolation_factor == 0.2
        assert config.near_clip == 0.3
        assert config.far_clip == 2000.0
        assert (config.channel_x, config.channel_y, config.channel_z) == (
            "ParamAngleX", "ParamAngleY", "ParamAngleZ"
        )

    def test_frozen(self):
        config = TrackerConfig()
        with pytest.raises(AttributeError):
            config.norm_width = 100.0

    @pytest.mark.parametrize("kwargs", [
        {"norm_width": 0},
        {"norm_height": -5},
        {"position_low_pass": -1},
        {"rotation_low_pass": float("nan")},
        {"interpolation_factor": 0},
        {"interpolation_factor": 1.5},
        {"near_clip": 0},
        {"near_clip": 100, "far_clip": 50},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            TrackerConfig(**kwargs)

    def test_config_error_hierarchy(self):
        assert issubclass(ConfigError, HeadPoseError)
        assert issubclass(ConfigError, ValueError)

    def test_from_dict_coerces(self):
        config = TrackerConfig.from_dict({"norm_width": "320", "interpolation_factor": 1, "channel_z": "ParamBodyAngleZ"})
        assert config.norm_width == 320.0
        assert config.interpolation_factor == 1.0
        assert config.channel_z == "ParamBodyAngleZ"

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigError, match="smoothing"):
            TrackerConfig.from_dict({"smoothing": 0.5})

    def test_from_dict_bad_value(self):
        with pytest.raises(ConfigError):
            TrackerConfig.from_dict({"norm_width": "wide"})

    def test_round_trip_dict(self):
        config = TrackerConfig(norm_width=320, rotation_low_pass=1.0)
        assert TrackerConfig.from_dict(config.to_dict()) == config


class TestConfigFile:
    def test_load(self, tmp_path):
        path = tmp_path / "tracker.json"
        path.write_text(json.dumps({"position_low_pass": 8, "far_clip": 1000}))

        config = TrackerConfig.from_json(path)
        assert config.position_low_pass == 8.0
        assert config.far_clip == 1000.0
        assert config.norm_width == 200.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TrackerConfig.from_json(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            TrackerConfig.from_json(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ConfigError):
            TrackerConfig.from_json(path)
