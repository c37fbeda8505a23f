"""Type definitions for head pose data structures."""

from dataclasses import dataclass, field
from typing import Optional, Tuple
import numpy as np


@dataclass
class FaceRegion:
    """Face bounding box in pixel coordinates."""

    left: int
    top: int
    right: int
    bottom: int
    score: Optional[float] = None

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top


def _identity_quaternion() -> np.ndarray:
    return np.array([0.0, 0.0, 0.0, 1.0])


@dataclass
class Pose:
    """
    Camera-relative head pose.

    Rotation is a unit quaternion stored scalar-last (x, y, z, w).
    The default pose sits at the origin with no rotation.
    """

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=_identity_quaternion)


@dataclass
class PoseSolution:
    """Result of one PnP solve."""

    rvec: np.ndarray  # (3, 1) rotation vector
    tvec: np.ndarray  # (3, 1) translation vector
    in_viewport: bool


@dataclass
class FrameResult:
    """Output of one pipeline pass."""

    frame_idx: int
    angles: Tuple[float, float, float]
    detected: bool
    in_viewport: Optional[bool] = None
    elapsed: float = 0.0
