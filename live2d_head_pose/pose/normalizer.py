"""Landmark normalization into a fixed virtual frame."""

from typing import Sequence, Union
import numpy as np

from ..core.constants import (
    DEFAULT_NORM_HEIGHT,
    DEFAULT_NORM_WIDTH,
    LANDMARK_POINTS,
    NUM_LANDMARKS,
)
from ..core.errors import DegenerateLandmarksError, LandmarkCountError


def as_landmark_array(points: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
    """
    Convert landmarks to a float (68, 2) array.

    Raises:
        LandmarkCountError: If the input does not hold exactly 68 2D points
    """
    array = np.asarray(points, dtype=np.float64)
    if array.ndim != 2 or array.shape[1] < 2:
        raise LandmarkCountError(f"Landmarks must be an (N, 2) array, got shape {array.shape}")
    if array.shape[0] != NUM_LANDMARKS:
        raise LandmarkCountError(f"Expected {NUM_LANDMARKS} landmarks, got {array.shape[0]}")
    return array[:, :2]


class LandmarkNormalizer:
    """
    Rescale and re-center landmarks so pose solving is independent of the
    subject's distance from the camera and of the camera resolution.

    The vertical nose-tip-to-chin distance is mapped to half the normalization
    height and the nose tip is moved to the center of the virtual frame.
    """

    def __init__(self,
                 norm_width: float = DEFAULT_NORM_WIDTH,
                 norm_height: float = DEFAULT_NORM_HEIGHT):
        """
        Initialize the normalizer.

        Args:
            norm_width: Width of the virtual frame
            norm_height: Height of the virtual frame
        """
        self.norm_width = norm_width
        self.norm_height = norm_height

    @property
    def center(self) -> np.ndarray:
        return np.array([self.norm_width / 2.0, self.norm_height / 2.0])

    def scale(self, landmarks: np.ndarray) -> float:
        """Scale factor calibrated from the nose-tip-to-chin vertical distance."""
        nose_tip = landmarks[LANDMARK_POINTS["nose_tip"]]
        chin = landmarks[LANDMARK_POINTS["chin"]]
        return abs(nose_tip[1] - chin[1]) / (self.norm_height / 2.0)

    def normalize(self, landmarks: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
        """
        Normalize a landmark set.

        Args:
            landmarks: 68 points in pixel coordinates

        Returns:
            68 normalized points, same indexing

        Raises:
            LandmarkCountError: If the set does not hold exactly 68 points
            DegenerateLandmarksError: If nose tip and chin share the same height
        """
        points = as_landmark_array(landmarks)

        scale = self.scale(points)
        if scale == 0 or not np.isfinite(scale):
            raise DegenerateLandmarksError(
                f"Cannot normalize landmarks with scale {scale!r} (nose tip and chin are level)"
            )

        offset = points[LANDMARK_POINTS["nose_tip"]] * scale - self.center
        return points * scale - offset
