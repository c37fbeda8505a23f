"""Per-frame head pose pipeline."""

from dataclasses import dataclass, field
from typing import List, Optional, Iterator, Union, Sequence, Tuple
import logging
import cv2
import numpy as np

from ..core.base_channel import AvatarChannel
from ..core.base_detector import BaseLandmarkSource
from ..core.config import TrackerConfig
from ..core.errors import DegenerateLandmarksError
from ..core.types import FaceRegion, FrameResult, Pose
from ..pose.normalizer import LandmarkNormalizer, as_landmark_array
from ..pose.solver import PoseSolver
from ..pose.stabilizer import PoseStabilizer, pose_from_rvec_tvec
from ..pose.transform import pose_to_angles
from .smoother import AngleSmoother, apply_angles
from .stream_utils import is_iterator

logger = logging.getLogger(__name__)


@dataclass
class PipelineState:
    """
    Everything the pipeline carries from one frame to the next.

    Attributes:
        previous_pose: Last pose accepted by the stabilizer
        extrinsics: Last finite (rvec, tvec), seeds the next refinement solve
        head_rotation: Smoothed avatar-space rotation (degrees)
        frame_idx: Number of frames processed so far
        elapsed: Sum of frame durations passed to process_frame
    """
    previous_pose: Pose = field(default_factory=Pose)
    extrinsics: Optional[Tuple[np.ndarray, np.ndarray]] = None
    head_rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    frame_idx: int = 0
    elapsed: float = 0.0


@dataclass
class FrameData:
    """Data for a single frame in the streaming pipeline."""
    frame_idx: int
    image: Optional[np.ndarray] = None
    region: Optional[FaceRegion] = None
    landmarks: Optional[np.ndarray] = None
    result: Optional[FrameResult] = None


class HeadPosePipeline:
    """
    Landmarks in, smoothed avatar head angles out.

    Runs normalize → solve → stabilize → transform → smooth → apply once per
    frame. Frames without landmarks, or with landmarks that cannot be
    normalized, leave every piece of state untouched so the avatar holds its
    last orientation.
    """

    def __init__(self,
                 config: Optional[TrackerConfig] = None,
                 channels: Optional[Sequence[Optional[AvatarChannel]]] = None,
                 detector: Optional[BaseLandmarkSource] = None):
        """
        Initialize pipeline.

        Args:
            config: Tracker settings, defaults when omitted
            channels: Up to three avatar channels for the x, y and z angles;
                      missing or None entries are skipped
            detector: Landmark source used by process() on raw images
        """
        self.config = config or TrackerConfig()
        self.channels: List[Optional[AvatarChannel]] = list(channels or [])
        self.channels += [None] * (3 - len(self.channels))
        self.detector = detector

        self.normalizer = LandmarkNormalizer(self.config.norm_width, self.config.norm_height)
        self.solver = PoseSolver(
            self.config.norm_width,
            self.config.norm_height,
            self.config.near_clip,
            self.config.far_clip,
        )
        self.stabilizer = PoseStabilizer(self.config.position_low_pass, self.config.rotation_low_pass)
        self.smoother = AngleSmoother(self.config.interpolation_factor)

        self.state = PipelineState()

    def process_frame(self, landmarks: Optional[np.ndarray], dt: float = 0.0) -> FrameResult:
        """
        Run one full pipeline pass.

        Args:
            landmarks: 68 pixel-space points, or None when no face was found
            dt: Time since the previous frame, accumulated into FrameResult.elapsed

        Returns:
            FrameResult with the smoothed head angles

        Raises:
            LandmarkCountError: If landmarks are given but are not 68 points
        """
        points = None if landmarks is None else as_landmark_array(landmarks)

        state = self.state
        state.frame_idx += 1
        state.elapsed += dt

        if points is None:
            return self._held_result()

        try:
            normalized = self.normalizer.normalize(points)
            solution = self.solver.solve(normalized, state.extrinsics)
        except DegenerateLandmarksError as e:
            logger.debug("Skipping frame %d: %s", state.frame_idx, e)
            return self._held_result()
        except cv2.error as e:
            logger.warning("Skipping frame %d: pose solve failed: %s", state.frame_idx, e)
            return self._held_result()

        pose = None
        if solution.in_viewport:
            pose = self.stabilizer.stabilize(
                state.previous_pose,
                pose_from_rvec_tvec(solution.rvec, solution.tvec),
            )
            state.previous_pose = pose

        if np.all(np.isfinite(solution.rvec)) and np.all(np.isfinite(solution.tvec)):
            state.extrinsics = (solution.rvec, solution.tvec)

        raw_angles = pose_to_angles(solution.rvec, solution.tvec, pose)
        state.head_rotation = self.smoother.smooth(state.head_rotation, raw_angles)
        apply_angles(state.head_rotation, self.channels)

        return FrameResult(
            frame_idx=state.frame_idx - 1,
            angles=state.head_rotation,
            detected=True,
            in_viewport=solution.in_viewport,
            elapsed=state.elapsed,
        )

    def _held_result(self) -> FrameResult:
        return FrameResult(
            frame_idx=self.state.frame_idx - 1,
            angles=self.state.head_rotation,
            detected=False,
            elapsed=self.state.elapsed,
        )

    def process(self,
                input_data: Union[np.ndarray, Iterator[np.ndarray], List[np.ndarray]],
                dt: float = 0.0) -> Union[FrameData, Iterator[FrameData], List[FrameData]]:
        """
        Detect landmarks in image(s) and run them through the pipeline.

        Args:
            input_data: Input frames (single, list, or iterator)
            dt: Time between frames

        Returns:
            - Single frame: FrameData
            - List input: list of FrameData
            - Iterator input: iterator of FrameData (streaming)
        """
        if self.detector is None:
            raise ValueError("A detector is required to process images")

        if isinstance(input_data, np.ndarray):
            return self._process_image(input_data, dt)

        elif is_iterator(input_data):
            return self._process_stream(input_data, dt)

        else:
            return [self._process_image(image, dt) for image in input_data]

    def _process_image(self, image: np.ndarray, dt: float) -> FrameData:
        region, landmarks = self.detector.detect_single(image)
        result = self.process_frame(landmarks, dt)
        return FrameData(
            frame_idx=result.frame_idx,
            image=image,
            region=region,
            landmarks=landmarks,
            result=result,
        )

    def _process_stream(self, frames: Iterator[np.ndarray], dt: float) -> Iterator[FrameData]:
        """
        Process a frame stream one frame at a time.

        Yields:
            FrameData objects with processed results
        """
        for frame in frames:
            yield self._process_image(frame, dt)

    def reset(self):
        """Forget all cross-frame state."""
        self.state = PipelineState()
