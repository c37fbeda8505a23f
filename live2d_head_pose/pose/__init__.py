"""Head pose estimation: normalization, PnP solving, stabilization and coordinate conversion."""

from .normalizer import LandmarkNormalizer
from .solver import PoseSolver, extract_anchor_points
from .stabilizer import PoseStabilizer, pose_from_rvec_tvec
from .transform import pose_to_angles

__all__ = [
    "LandmarkNormalizer",
    "PoseSolver",
    "PoseStabilizer",
    "extract_anchor_points",
    "pose_from_rvec_tvec",
    "pose_to_angles",
]
