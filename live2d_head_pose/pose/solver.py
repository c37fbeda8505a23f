"""Head pose solving with Perspective-n-Point against a fixed 3D face model."""

from typing import Optional, Tuple
import logging
import cv2
import numpy as np

from ..core.constants import (
    DEFAULT_FAR_CLIP,
    DEFAULT_NEAR_CLIP,
    DEFAULT_NORM_HEIGHT,
    DEFAULT_NORM_WIDTH,
    FACE_MODEL_POINTS,
    LANDMARK_POINTS,
)
from ..core.errors import IntrinsicsError, LandmarkCountError
from ..core.types import PoseSolution
from .normalizer import as_landmark_array

logger = logging.getLogger(__name__)


def build_camera_matrix(norm_width: float, norm_height: float) -> np.ndarray:
    """
    Pinhole intrinsics for the normalized frame.

    Focal length is the larger frame side; the principal point is the frame center.
    """
    focal = max(norm_width, norm_height)
    camera_matrix = np.array([
        [focal, 0.0, norm_width / 2.0],
        [0.0, focal, norm_height / 2.0],
        [0.0, 0.0, 1.0],
    ], dtype=np.float64)
    return camera_matrix


def build_view_projection(camera_matrix: np.ndarray,
                          width: float,
                          height: float,
                          near: float = DEFAULT_NEAR_CLIP,
                          far: float = DEFAULT_FAR_CLIP) -> np.ndarray:
    """
    OpenGL-style view-projection matrix for the camera intrinsics.

    The view part flips Z so points in front of the OpenCV camera (positive Z)
    land in front of the GL camera (negative Z).

    Args:
        camera_matrix: 3x3 intrinsics
        width: Frame width the intrinsics refer to
        height: Frame height the intrinsics refer to
        near: Near clip plane
        far: Far clip plane

    Returns:
        4x4 matrix mapping camera-space points to clip space
    """
    fx, fy = camera_matrix[0, 0], camera_matrix[1, 1]
    cx, cy = camera_matrix[0, 2], camera_matrix[1, 2]

    projection = np.zeros((4, 4), dtype=np.float64)
    projection[0, 0] = 2.0 * fx / width
    projection[0, 2] = 1.0 - 2.0 * cx / width
    projection[1, 1] = 2.0 * fy / height
    projection[1, 2] = -1.0 + 2.0 * cy / height
    projection[2, 2] = -(far + near) / (far - near)
    projection[2, 3] = -2.0 * far * near / (far - near)
    projection[3, 2] = -1.0

    view = np.diag([1.0, 1.0, -1.0, 1.0])
    return projection @ view


def extract_anchor_points(normalized: np.ndarray) -> np.ndarray:
    """
    Pick the 7 image points that correspond to FACE_MODEL_POINTS.

    Args:
        normalized: 68 normalized landmarks

    Returns:
        (7, 2) array: left eye, right eye, nose, mouth corners, ears
    """
    left_eye = normalized[LANDMARK_POINTS["left_eye_pair"]].mean(axis=0)
    right_eye = normalized[LANDMARK_POINTS["right_eye_pair"]].mean(axis=0)
    return np.array([
        left_eye,
        right_eye,
        normalized[LANDMARK_POINTS["nose_base"]],
        normalized[LANDMARK_POINTS["mouth_left"]],
        normalized[LANDMARK_POINTS["mouth_right"]],
        normalized[LANDMARK_POINTS["ear_left"]],
        normalized[LANDMARK_POINTS["ear_right"]],
    ], dtype=np.float64)


class PoseSolver:
    """
    Solves the head pose from normalized landmarks.

    Each frame gets a fresh least-squares solve whose translation is checked
    against the view frustum. Inside the frustum, the solve is refined starting
    from the previous frame's extrinsics for temporal stability; outside, the
    fresh solve is kept.
    """

    def __init__(self,
                 norm_width: float = DEFAULT_NORM_WIDTH,
                 norm_height: float = DEFAULT_NORM_HEIGHT,
                 near_clip: float = DEFAULT_NEAR_CLIP,
                 far_clip: float = DEFAULT_FAR_CLIP,
                 object_points: np.ndarray = FACE_MODEL_POINTS):
        """
        Initialize the solver.

        Args:
            norm_width: Normalization frame width (sets the principal point)
            norm_height: Normalization frame height
            near_clip: Near plane for the viewport test
            far_clip: Far plane for the viewport test
            object_points: 3D model points, one per anchor
        """
        self.norm_width = norm_width
        self.norm_height = norm_height
        self.object_points = np.array(object_points, dtype=np.float64)

        self.camera_matrix: Optional[np.ndarray] = build_camera_matrix(norm_width, norm_height)
        self.dist_coeffs = np.zeros((4, 1), dtype=np.float64)
        self.view_projection = build_view_projection(
            self.camera_matrix, norm_width, norm_height, near_clip, far_clip
        )

    def is_in_viewport(self, tvec: np.ndarray) -> bool:
        """
        Check whether a translation projects inside the view frustum.

        A NaN depth counts as outside.
        """
        t = np.asarray(tvec, dtype=np.float64).reshape(3)
        if np.isnan(t[2]):
            return False

        clip = self.view_projection @ np.array([t[0], t[1], t[2], 1.0])
        w = clip[3]
        if w != 0:
            ndc = clip[:3] / w
            if np.any(ndc < -1.0) or np.any(ndc > 1.0):
                return False
        return True

    def solve(self,
              normalized: np.ndarray,
              previous: Optional[Tuple[np.ndarray, np.ndarray]] = None) -> PoseSolution:
        """
        Solve the pose for one frame of normalized landmarks.

        Args:
            normalized: 68 normalized landmarks
            previous: (rvec, tvec) of the previous frame used to seed refinement

        Returns:
            PoseSolution with rotation/translation vectors and the viewport verdict

        Raises:
            LandmarkCountError: If the set does not hold exactly 68 points
            IntrinsicsError: If the camera intrinsics are unset
        """
        points = as_landmark_array(normalized)
        return self.solve_anchors(extract_anchor_points(points), previous)

    def solve_anchors(self,
                      image_points: np.ndarray,
                      previous: Optional[Tuple[np.ndarray, np.ndarray]] = None) -> PoseSolution:
        """
        Solve the pose from the 7 anchor image points.

        Args:
            image_points: (7, 2) points in the normalized frame
            previous: (rvec, tvec) seed for the refinement solve

        Returns:
            PoseSolution
        """
        if self.camera_matrix is None:
            raise IntrinsicsError("Camera intrinsics are not set")

        image_points = np.asarray(image_points, dtype=np.float64).reshape(-1, 2)
        if image_points.shape[0] != len(self.object_points):
            raise LandmarkCountError(
                f"Expected {len(self.object_points)} anchor points, got {image_points.shape[0]}"
            )

        rvec, tvec = self._solve(image_points)

        in_viewport = self.is_in_viewport(tvec)
        if not in_viewport:
            logger.debug("Pose out of viewport (tvec=%s), keeping fresh solve", tvec.ravel())
            return PoseSolution(rvec=rvec, tvec=tvec, in_viewport=False)

        seed_rvec, seed_tvec = previous if previous is not None else (rvec, tvec)
        rvec, tvec = self._solve(image_points, seed_rvec, seed_tvec)
        return PoseSolution(rvec=rvec, tvec=tvec, in_viewport=True)

    def _solve(self,
               image_points: np.ndarray,
               rvec: Optional[np.ndarray] = None,
               tvec: Optional[np.ndarray] = None) -> Tuple[np.ndarray, np.ndarray]:
        """Run one iterative PnP solve, optionally seeded with extrinsics."""
        if rvec is not None and tvec is not None:
            success, rvec_out, tvec_out = cv2.solvePnP(
                self.object_points,
                image_points,
                self.camera_matrix,
                self.dist_coeffs,
                rvec=np.array(rvec, dtype=np.float64).reshape(3, 1),
                tvec=np.array(tvec, dtype=np.float64).reshape(3, 1),
                useExtrinsicGuess=True,
                flags=cv2.SOLVEPNP_ITERATIVE,
            )
        else:
            success, rvec_out, tvec_out = cv2.solvePnP(
                self.object_points,
                image_points,
                self.camera_matrix,
                self.dist_coeffs,
                flags=cv2.SOLVEPNP_ITERATIVE,
            )
        if not success:
            logger.debug("solvePnP reported failure, using its last estimate")

        return rvec_out.reshape(3, 1), tvec_out.reshape(3, 1)

    def project(self, rvec: np.ndarray, tvec: np.ndarray) -> np.ndarray:
        """Project the face model through the given extrinsics into the normalized frame."""
        projected, _ = cv2.projectPoints(
            self.object_points,
            np.asarray(rvec, dtype=np.float64).reshape(3, 1),
            np.asarray(tvec, dtype=np.float64).reshape(3, 1),
            self.camera_matrix,
            self.dist_coeffs,
        )
        return projected.reshape(-1, 2)
