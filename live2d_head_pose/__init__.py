"""
Live2D Head Pose Package

Estimates head orientation from 68 facial landmarks with a PnP solve and
drives a Live2D avatar's head angle parameters from it in real time.
"""

__version__ = "1.0.0"

from .core.base_channel import AvatarChannel, ParameterChannel
from .core.config import TrackerConfig
from .core.errors import (
    ConfigError,
    DegenerateLandmarksError,
    HeadPoseError,
    IntrinsicsError,
    LandmarkCountError,
)
from .core.types import FaceRegion, FrameResult, Pose, PoseSolution
from .pose.normalizer import LandmarkNormalizer
from .pose.solver import PoseSolver
from .pose.stabilizer import PoseStabilizer
from .processors.camera_reader import CameraReader
from .processors.data_exporter import DataExporter
from .processors.pipeline import HeadPosePipeline
from .processors.smoother import AngleSmoother

__all__ = [
    "AngleSmoother",
    "AvatarChannel",
    "CameraReader",
    "ConfigError",
    "DataExporter",
    "DegenerateLandmarksError",
    "FaceRegion",
    "FrameResult",
    "HeadPoseError",
    "HeadPosePipeline",
    "IntrinsicsError",
    "LandmarkCountError",
    "LandmarkNormalizer",
    "ParameterChannel",
    "Pose",
    "PoseSolution",
    "PoseSolver",
    "PoseStabilizer",
    "TrackerConfig",
]
