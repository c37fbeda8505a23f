"""Conversion of solved poses into avatar-space orientation angles.

OpenCV cameras look down +Z with +Y pointing down the image; the avatar engine
uses +Y up and a left-handed Z. The fixed axis inversions below reconcile the
two conventions. Euler angles follow the engine's order: roll about Z first,
then pitch about X, then yaw about Y (M = Ry @ Rx @ Rz), reported in [0, 360).
"""

from typing import Optional, Tuple
import cv2
import numpy as np
from scipy.spatial.transform import Rotation

from ..core.types import Pose

INVERT_Y = np.diag([1.0, -1.0, 1.0, 1.0])
INVERT_Z = np.diag([1.0, 1.0, -1.0, 1.0])


def trs_matrix(position: np.ndarray, rotation: np.ndarray) -> np.ndarray:
    """Rigid 4x4 transform from a translation and an (x, y, z, w) quaternion, unit scale."""
    matrix = np.eye(4)
    matrix[:3, :3] = Rotation.from_quat(rotation).as_matrix()
    matrix[:3, 3] = np.asarray(position, dtype=np.float64).reshape(3)
    return matrix


def build_transformation(rvec: np.ndarray,
                         tvec: np.ndarray,
                         pose: Optional[Pose] = None) -> np.ndarray:
    """
    Build the camera-space transform for this frame.

    When a stabilized pose is given (in-viewport frames) the transform is first
    built from it. Rows 0-2 are then always replaced by the raw Rodrigues
    rotation and tvec, so the final rotation never comes from the filtered pose.

    Args:
        rvec: Raw rotation vector from the solver
        tvec: Raw translation vector from the solver
        pose: Stabilized pose, or None when the frame was out of viewport

    Returns:
        4x4 transform
    """
    if pose is not None:
        transformation = trs_matrix(pose.position, pose.rotation)
    else:
        transformation = np.zeros((4, 4))

    rotation_matrix, _ = cv2.Rodrigues(np.asarray(rvec, dtype=np.float64).reshape(3, 1))
    transformation[:3, :3] = rotation_matrix
    transformation[:3, 3] = np.asarray(tvec, dtype=np.float64).reshape(3)
    transformation[3, :] = (0.0, 0.0, 0.0, 1.0)
    return transformation


def to_avatar_space(transformation: np.ndarray) -> np.ndarray:
    """Apply the axis inversions: invertY @ T @ invertY @ invertY @ invertZ."""
    matrix = INVERT_Y @ transformation @ INVERT_Y
    return matrix @ INVERT_Y @ INVERT_Z


def look_rotation(forward: np.ndarray, up: np.ndarray) -> np.ndarray:
    """
    Quaternion that points +Z along forward with +Y as close to up as possible.

    Degenerate input (zero forward, or up parallel to forward) yields identity
    or the shortest-arc rotation onto forward.

    Returns:
        Quaternion (x, y, z, w)
    """
    forward = np.asarray(forward, dtype=np.float64)
    up = np.asarray(up, dtype=np.float64)

    forward_norm = np.linalg.norm(forward)
    if forward_norm < 1e-9 or not np.isfinite(forward_norm):
        return np.array([0.0, 0.0, 0.0, 1.0])
    z_axis = forward / forward_norm

    x_axis = np.cross(up, z_axis)
    x_norm = np.linalg.norm(x_axis)
    if x_norm < 1e-9:
        # up is parallel to forward: rotate +Z onto forward by the shortest arc
        rotation, _ = Rotation.align_vectors([z_axis], [[0.0, 0.0, 1.0]])
        return rotation.as_quat()
    x_axis /= x_norm
    y_axis = np.cross(z_axis, x_axis)

    basis = np.column_stack([x_axis, y_axis, z_axis])
    return Rotation.from_matrix(basis).as_quat()


def quaternion_to_euler(rotation: np.ndarray) -> Tuple[float, float, float]:
    """
    Euler angles (x, y, z) in degrees, each wrapped into [0, 360).

    Args:
        rotation: Quaternion (x, y, z, w)
    """
    # Intrinsic Y-X-Z equals M = Ry @ Rx @ Rz; scipy returns (y, x, z)
    y, x, z = Rotation.from_quat(rotation).as_euler("YXZ", degrees=True)
    return float(x % 360.0), float(y % 360.0), float(z % 360.0)


def extract_euler_angles(matrix: np.ndarray) -> Tuple[float, float, float]:
    """Orientation of an avatar-space transform from its forward (col 2) and up (col 1) axes."""
    forward = matrix[:3, 2]
    up = matrix[:3, 1]
    return quaternion_to_euler(look_rotation(forward, up))


def pose_to_angles(rvec: np.ndarray,
                   tvec: np.ndarray,
                   pose: Optional[Pose] = None) -> Tuple[float, float, float]:
    """
    Compute avatar-space orientation angles for one frame.

    Args:
        rvec: Raw rotation vector
        tvec: Raw translation vector
        pose: Stabilized pose for in-viewport frames, None otherwise

    Returns:
        Euler angles (x, y, z) in degrees, [0, 360)
    """
    transformation = build_transformation(rvec, tvec, pose)
    return extract_euler_angles(to_avatar_space(transformation))
