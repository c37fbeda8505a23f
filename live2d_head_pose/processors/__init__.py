"""Per-frame processing: pipeline, smoothing, capture and export utilities."""

from .camera_reader import CameraReader
from .data_exporter import DataExporter
from .overlay import draw_tracking_overlay
from .pipeline import FrameData, HeadPosePipeline, PipelineState
from .smoother import AngleSmoother, apply_angles
from .stream_utils import (
    apply_to_stream,
    is_iterator,
)

__all__ = [
    "AngleSmoother",
    "CameraReader",
    "DataExporter",
    "FrameData",
    "HeadPosePipeline",
    "PipelineState",
    "apply_angles",
    "apply_to_stream",
    "draw_tracking_overlay",
    "is_iterator",
]
