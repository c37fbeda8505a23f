"""dlib detector wrapper for 68-point landmark detection."""

from typing import List, Optional
import logging
import cv2
import dlib
import numpy as np

from ..core.base_detector import BaseLandmarkSource
from ..core.types import FaceRegion
from .model_download import ensure_model

logger = logging.getLogger(__name__)

PREDICTOR_FILENAME = "shape_predictor_68_face_landmarks.dat"
PREDICTOR_URL = "http://dlib.net/files/shape_predictor_68_face_landmarks.dat.bz2"


class DlibDetector(BaseLandmarkSource):
    """
    HOG frontal face detector plus dlib's 68-point shape predictor.
    """

    def __init__(self,
                 predictor_path: Optional[str] = None,
                 upsample: int = 0):
        """
        Initialize dlib detector.

        Args:
            predictor_path: Path to shape_predictor_68_face_landmarks.dat;
                            downloaded to the current directory when omitted
            upsample: Number of times to upsample the image before detecting,
                      finds smaller faces at a higher cost
        """
        self.upsample = upsample

        if predictor_path is None:
            predictor_path = ensure_model(PREDICTOR_FILENAME, PREDICTOR_URL, compressed=True)

        self.face_detector = dlib.get_frontal_face_detector()
        self.predictor = dlib.shape_predictor(predictor_path)
        logger.info("Loaded dlib shape predictor from %s", predictor_path)

    def preprocess_image(self, image: np.ndarray) -> np.ndarray:
        """dlib expects RGB; frames from OpenCV are BGR."""
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

    def detect(self, image: np.ndarray) -> List[FaceRegion]:
        """
        Detect faces, largest first.

        Args:
            image: RGB image

        Returns:
            Face regions
        """
        rects = self.face_detector(image, self.upsample)
        regions = [FaceRegion(r.left(), r.top(), r.right(), r.bottom()) for r in rects]
        return sorted(regions, key=lambda r: r.width * r.height, reverse=True)

    def landmarks(self, image: np.ndarray, region: FaceRegion) -> Optional[np.ndarray]:
        """
        Predict 68 landmarks inside a region.

        Returns:
            Landmarks as float array (68, 2) in pixel coordinates
        """
        rect = dlib.rectangle(int(region.left), int(region.top), int(region.right), int(region.bottom))
        shape = self.predictor(image, rect)
        if shape.num_parts != self.get_num_landmarks():
            logger.warning("Shape predictor returned %d points", shape.num_parts)
            return None
        return np.array([[p.x, p.y] for p in shape.parts()], dtype=np.float64)
