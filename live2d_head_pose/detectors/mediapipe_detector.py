"""MediaPipe detector wrapper mapping 478-point face mesh onto the 68-point layout."""

from typing import List, Optional
import logging
import cv2
import numpy as np
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from ..core.base_detector import BaseLandmarkSource
from ..core.constants import MEDIAPIPE_TO_68
from ..core.types import FaceRegion
from .model_download import ensure_model

logger = logging.getLogger(__name__)

MODEL_FILENAME = "face_landmarker.task"
MODEL_URL = "https://storage.googleapis.com/mediapipe-models/face_landmarker/face_landmarker/float16/1/face_landmarker.task"


class MediaPipeDetector(BaseLandmarkSource):
    """
    MediaPipe FaceLandmarker detector using the Tasks API.

    The face mesh has no separate detection step, so detect() runs the full
    landmarker, derives the region from the mesh bounds and keeps the mapped
    68 points for the following landmarks() call.

    Uses RunningMode.VIDEO, so frames must be fed in capture order.
    """

    def __init__(self,
                 model_path: Optional[str] = None,
                 max_num_faces: int = 1,
                 min_detection_confidence: float = 0.5,
                 min_tracking_confidence: float = 0.5,
                 fps: float = 30.0):
        """
        Initialize MediaPipe FaceLandmarker detector with auto-download.

        Args:
            model_path: Path to face_landmarker.task; downloaded when omitted
            max_num_faces: Maximum number of faces to detect
            min_detection_confidence: Minimum confidence for face detection
            min_tracking_confidence: Minimum confidence for landmark tracking
            fps: Frame rate used to derive per-frame timestamps
        """
        # Frame counter for timestamp calculation
        self.frame_counter = 0
        self.frame_time_ms = 1000.0 / fps

        if model_path is None:
            model_path = ensure_model(MODEL_FILENAME, MODEL_URL)

        base_options = python.BaseOptions(model_asset_path=model_path)
        options = vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.VIDEO,
            num_faces=max_num_faces,
            min_face_detection_confidence=min_detection_confidence,
            min_face_presence_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            output_face_blendshapes=False,
            output_facial_transformation_matrixes=False
        )
        self.landmarker = vision.FaceLandmarker.create_from_options(options)

        # Regions from the last detect() call and their mapped points, same order
        self._regions: List[FaceRegion] = []
        self._points: List[np.ndarray] = []

    def detect(self, image: np.ndarray) -> List[FaceRegion]:
        """
        Run the face landmarker on a BGR image.

        Returns:
            One region per detected face mesh, largest first
        """
        height, width = image.shape[:2]
        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)

        timestamp_ms = int(self.frame_counter * self.frame_time_ms)
        self.frame_counter += 1

        detection_result = self.landmarker.detect_for_video(mp_image, timestamp_ms)

        faces = []
        for face_landmarks in detection_result.face_landmarks:
            mesh = np.array([[lm.x * width, lm.y * height] for lm in face_landmarks], dtype=np.float64)
            if mesh.shape[0] <= max(MEDIAPIPE_TO_68):
                logger.warning("Face mesh has only %d points", mesh.shape[0])
                continue

            points = mesh[MEDIAPIPE_TO_68]
            left, top = np.floor(mesh.min(axis=0)).astype(int)
            right, bottom = np.ceil(mesh.max(axis=0)).astype(int)
            region = FaceRegion(int(left), int(top), int(right), int(bottom))
            faces.append((region, points))

        faces.sort(key=lambda face: face[0].width * face[0].height, reverse=True)
        self._regions = [region for region, _ in faces]
        self._points = [points for _, points in faces]
        return list(self._regions)

    def landmarks(self, image: np.ndarray, region: FaceRegion) -> Optional[np.ndarray]:
        """Return the 68 points computed for a region by the last detect() call."""
        for known, points in zip(self._regions, self._points):
            if known is region or known == region:
                return points
        return None

    def close(self):
        """Clean up MediaPipe resources."""
        if getattr(self, 'landmarker', None) is not None:
            self.landmarker.close()
            self.landmarker = None
