"""Core components for live2d-head-pose package."""

from .base_channel import AvatarChannel, ParameterChannel
from .base_detector import BaseLandmarkSource
from .base_frame_reader import BaseFrameReader
from .config import TrackerConfig
from .errors import (
    ConfigError,
    DegenerateLandmarksError,
    HeadPoseError,
    IntrinsicsError,
    LandmarkCountError,
)
from .types import FaceRegion, FrameResult, Pose, PoseSolution

__all__ = [
    "AvatarChannel",
    "BaseFrameReader",
    "BaseLandmarkSource",
    "ConfigError",
    "DegenerateLandmarksError",
    "FaceRegion",
    "FrameResult",
    "HeadPoseError",
    "IntrinsicsError",
    "LandmarkCountError",
    "ParameterChannel",
    "Pose",
    "PoseSolution",
    "TrackerConfig",
]
