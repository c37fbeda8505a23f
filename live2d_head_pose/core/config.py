"""Tracker configuration."""

from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Union
import json
import logging
import math

from . import constants
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackerConfig:
    """
    Settings for the head pose pipeline.

    Attributes:
        norm_width: Width of the virtual frame landmarks are normalized into
        norm_height: Height of the virtual frame; also calibrates the nose-to-chin scale
        position_low_pass: Dead-zone threshold for pose position (model units)
        rotation_low_pass: Dead-zone threshold for pose rotation (degrees)
        interpolation_factor: Per-frame angular interpolation factor (0-1]
        near_clip: Near plane of the viewport test
        far_clip: Far plane of the viewport test
        channel_x: Avatar parameter driven by the first output angle
        channel_y: Avatar parameter driven by the second output angle
        channel_z: Avatar parameter driven by the third output angle
    """

    norm_width: float = constants.DEFAULT_NORM_WIDTH
    norm_height: float = constants.DEFAULT_NORM_HEIGHT
    position_low_pass: float = constants.DEFAULT_POSITION_LOW_PASS
    rotation_low_pass: float = constants.DEFAULT_ROTATION_LOW_PASS
    interpolation_factor: float = constants.DEFAULT_INTERPOLATION_FACTOR
    near_clip: float = constants.DEFAULT_NEAR_CLIP
    far_clip: float = constants.DEFAULT_FAR_CLIP
    channel_x: str = constants.PARAM_ANGLE_X
    channel_y: str = constants.PARAM_ANGLE_Y
    channel_z: str = constants.PARAM_ANGLE_Z

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check value ranges, raising ConfigError on the first bad value."""
        for name in ("norm_width", "norm_height"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ConfigError(f"{name} must be a positive number, got {value!r}")

        for name in ("position_low_pass", "rotation_low_pass"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigError(f"{name} must be non-negative, got {value!r}")

        if not 0 < self.interpolation_factor <= 1:
            raise ConfigError(
                f"interpolation_factor must be in (0, 1], got {self.interpolation_factor!r}"
            )

        if not 0 < self.near_clip < self.far_clip:
            raise ConfigError(
                f"clip planes must satisfy 0 < near < far, got {self.near_clip!r}/{self.far_clip!r}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackerConfig":
        """
        Build a config from a plain dictionary.

        Args:
            data: Mapping of field names to values; missing fields keep defaults

        Returns:
            Validated TrackerConfig
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            try:
                kwargs[f.name] = str(value) if f.name.startswith("channel_") else float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for {f.name}: {value!r}") from e
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "TrackerConfig":
        """Load a config from a JSON file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(config_path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Config file is not valid JSON: {path}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file must hold a JSON object: {path}")

        logger.info("Loaded tracker config from %s", config_path)
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
