"""Dead-zone filtering of consecutive head poses."""

import logging
import numpy as np
from scipy.spatial.transform import Rotation

from ..core.constants import DEFAULT_POSITION_LOW_PASS, DEFAULT_ROTATION_LOW_PASS
from ..core.types import Pose

logger = logging.getLogger(__name__)


def pose_from_rvec_tvec(rvec: np.ndarray, tvec: np.ndarray) -> Pose:
    """
    Convert PnP extrinsics into a Pose.

    Args:
        rvec: Rotation vector (axis-angle, radians)
        tvec: Translation vector

    Returns:
        Pose with position = tvec and the axis-angle rotation as a quaternion
    """
    position = np.asarray(tvec, dtype=np.float64).reshape(3).copy()
    rotation = Rotation.from_rotvec(np.asarray(rvec, dtype=np.float64).reshape(3)).as_quat()
    return Pose(position=position, rotation=rotation)


def quaternion_angle(a: np.ndarray, b: np.ndarray) -> float:
    """Angle in degrees between two unit quaternions."""
    dot = min(abs(float(np.dot(a, b))), 1.0)
    return float(np.degrees(2.0 * np.arccos(dot)))


class PoseStabilizer:
    """
    Hard dead-zone filter for poses.

    Position and rotation are judged separately: a component whose change is
    below its threshold is replaced by the previous value, otherwise the new
    value passes through untouched.
    """

    def __init__(self,
                 position_low_pass: float = DEFAULT_POSITION_LOW_PASS,
                 rotation_low_pass: float = DEFAULT_ROTATION_LOW_PASS):
        """
        Initialize the stabilizer.

        Args:
            position_low_pass: Minimum position change (model units) to accept
            rotation_low_pass: Minimum rotation change (degrees) to accept
        """
        self.position_low_pass = position_low_pass
        self.rotation_low_pass = rotation_low_pass

    def stabilize(self, previous: Pose, current: Pose) -> Pose:
        """
        Filter a new pose against the previous one.

        Args:
            previous: Pose accepted on the previous frame
            current: Freshly solved pose

        Returns:
            The accepted pose (a new object; inputs are not modified)
        """
        position = current.position.copy()
        rotation = current.rotation.copy()

        position_delta = float(np.sum((current.position - previous.position) ** 2))
        if position_delta < self.position_low_pass ** 2:
            position = previous.position.copy()

        rotation_delta = quaternion_angle(current.rotation, previous.rotation)
        if rotation_delta < self.rotation_low_pass:
            rotation = previous.rotation.copy()

        logger.debug("Pose delta: position^2=%.3f rotation=%.3f deg", position_delta, rotation_delta)
        return Pose(position=position, rotation=rotation)
