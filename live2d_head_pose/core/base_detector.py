"""Base class for 68-point facial landmark sources."""

from abc import ABC, abstractmethod
from typing import Optional, List, Tuple, Union, Iterator, Any
import logging
import numpy as np

from .constants import NUM_LANDMARKS
from .types import FaceRegion

logger = logging.getLogger(__name__)


class BaseLandmarkSource(ABC):
    """
    Abstract base class for face detectors that produce 68 landmarks.

    Subclasses implement region detection and per-region landmark extraction;
    the base class ties the two together for single frames, lists and streams.
    """

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[FaceRegion]:
        """
        Find face regions in an image.

        Args:
            image: Input image as numpy array (H, W, 3) in BGR format

        Returns:
            Detected regions, most prominent first; empty if no face found
        """
        pass

    @abstractmethod
    def landmarks(self, image: np.ndarray, region: FaceRegion) -> Optional[np.ndarray]:
        """
        Extract landmarks for one detected region.

        Args:
            image: Image the region was detected in
            region: Face region returned by detect()

        Returns:
            Landmarks as float array (68, 2) in pixel coordinates, or None on failure
        """
        pass

    def get_num_landmarks(self) -> int:
        """Return the number of landmarks this detector provides."""
        return NUM_LANDMARKS

    def preprocess_image(self, image: np.ndarray) -> np.ndarray:
        """
        Preprocess image before detection.
        Default implementation returns image as-is.
        """
        return image

    def detect_landmarks(self, input_data: Union[np.ndarray, Iterator[np.ndarray], List[np.ndarray]]) -> Union[Optional[np.ndarray], Iterator[Optional[np.ndarray]], List[Optional[np.ndarray]]]:
        """
        Unified detection interface supporting single frame, batch, and streaming modes.

        Only the first detected face is used.

        Args:
            input_data: Input image(s) - single array, list, or iterator

        Returns:
            - Single frame: Optional[np.ndarray] (68, 2)
            - Multiple frames: Iterator or List of Optional[np.ndarray]
        """
        from ..processors.stream_utils import is_iterator, apply_to_stream

        if isinstance(input_data, np.ndarray):
            return self.detect_single(input_data)[1]

        elif is_iterator(input_data):
            return apply_to_stream(input_data, lambda image: self.detect_single(image)[1], preserve_none=True)

        else:
            return [self.detect_single(image)[1] for image in input_data]

    def detect_single(self, image: np.ndarray) -> Tuple[Optional[FaceRegion], Optional[np.ndarray]]:
        """
        Detect the first face and its landmarks in one image.

        Returns:
            Tuple of (region, landmarks); either may be None when nothing was found
        """
        image = self.preprocess_image(image)
        regions = self.detect(image)
        if not regions:
            return None, None

        region = regions[0]
        points = self.landmarks(image, region)
        if points is None:
            return region, None

        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if points.shape[0] != NUM_LANDMARKS:
            logger.warning("Expected %d landmarks, got %d", NUM_LANDMARKS, points.shape[0])
            return region, None

        return region, points

    def close(self) -> None:
        """Release detector resources."""
        pass

    def __enter__(self) -> "BaseLandmarkSource":
        return self

    def __exit__(self, exc_type: Optional[type], exc_val: Optional[Exception], exc_tb: Optional[Any]) -> None:
        self.close()
