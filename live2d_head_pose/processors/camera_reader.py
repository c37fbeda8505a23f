"""Camera and video file reader based on OpenCV."""

from typing import Iterator, Optional, Union
from pathlib import Path
import logging
import cv2
import numpy as np
from tqdm import tqdm

from ..core.base_frame_reader import BaseFrameReader

logger = logging.getLogger(__name__)


class CameraReader(BaseFrameReader):
    """
    Read frames from a webcam or a video file.

    Integer sources (or digit strings) open a camera device; anything else is
    treated as a video file path.
    """

    def __init__(self,
                 source: Union[int, str] = 0,
                 width: Optional[int] = None,
                 height: Optional[int] = None,
                 fps: Optional[float] = None,
                 mirror: bool = False):
        """
        Open the capture source.

        Args:
            source: Camera index or video file path
            width: Requested capture width (cameras only)
            height: Requested capture height (cameras only)
            fps: Requested capture frame rate (cameras only)
            mirror: Flip frames horizontally, as expected for front-facing cameras
        """
        super().__init__()
        self.mirror = mirror

        if isinstance(source, str) and source.isdigit():
            source = int(source)
        self.is_camera = isinstance(source, int)

        if not self.is_camera:
            video_path = Path(source)
            if not video_path.exists():
                raise FileNotFoundError(f"Video file not found: {source}")
            source = str(video_path)

        self.cap = cv2.VideoCapture(source)
        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open capture source: {source}")

        if self.is_camera:
            if width:
                self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            if height:
                self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
            if fps:
                self.cap.set(cv2.CAP_PROP_FPS, fps)

        # Report what the device actually granted
        self.fps = self.cap.get(cv2.CAP_PROP_FPS) or 30.0
        self.width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if not self.is_camera:
            self.frame_count = int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT))

        logger.info("Opened %s %s at %dx%d, %.1f fps",
                    "camera" if self.is_camera else "video", source, self.width, self.height, self.fps)

    def read_frames(self, show_progress: bool = True) -> Iterator[np.ndarray]:
        """
        Iterate over frames until the source is exhausted or closed.

        Args:
            show_progress: Show progress bar (video files only)

        Yields:
            Frames as numpy arrays (BGR format)
        """
        progress_bar = None
        if show_progress and not self.is_camera:
            progress_bar = tqdm(total=self.frame_count, desc="Reading frames")

        try:
            while self.cap is not None and self.cap.isOpened():
                ret, frame = self.cap.read()
                if not ret:
                    break

                if self.mirror:
                    frame = cv2.flip(frame, 1)

                yield frame

                if progress_bar:
                    progress_bar.update(1)
        finally:
            if progress_bar:
                progress_bar.close()

    def close(self) -> None:
        """Release video capture."""
        if self.cap is not None:
            self.cap.release()
            self.cap = None
