"""Tracking preview drawing."""

from typing import Optional, Sequence, Tuple
import cv2
import numpy as np

from ..core.types import FaceRegion

REGION_COLOR = (0, 0, 255)     # BGR red
LANDMARK_COLOR = (0, 255, 0)   # BGR green
TEXT_COLOR = (255, 255, 255)


def draw_tracking_overlay(frame: np.ndarray,
                          region: Optional[FaceRegion] = None,
                          landmarks: Optional[np.ndarray] = None,
                          angles: Optional[Sequence[float]] = None,
                          thickness: int = 2) -> np.ndarray:
    """
    Draw the face box, landmarks and head angles onto a copy of a frame.

    Args:
        frame: BGR image
        region: Detected face region
        landmarks: (68, 2) pixel-space landmarks
        angles: Head angles (x, y, z) to print in the top-left corner
        thickness: Line thickness for the face box

    Returns:
        Annotated copy of the frame
    """
    canvas = frame.copy()

    if region is not None:
        cv2.rectangle(canvas, (int(region.left), int(region.top)),
                      (int(region.right), int(region.bottom)), REGION_COLOR, thickness)

    if landmarks is not None:
        for x, y in np.asarray(landmarks).reshape(-1, 2):
            cv2.circle(canvas, (int(round(x)), int(round(y))), 2, LANDMARK_COLOR, -1)

    if angles is not None:
        text = "x:{:+.1f} y:{:+.1f} z:{:+.1f}".format(*angles)
        cv2.putText(canvas, text, (8, 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, TEXT_COLOR, 1, cv2.LINE_AA)

    return canvas


def preview_size(width: int, height: int, max_side: int = 640) -> Tuple[int, int]:
    """Fit a frame size inside max_side while keeping its aspect ratio."""
    scale = min(1.0, max_side / float(max(width, height)))
    return int(width * scale), int(height * scale)
