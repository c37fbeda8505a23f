"""Landmark source implementations.

Each backend lives in its own module and imports its library at module load,
so only the installed backends can be imported:

    from live2d_head_pose.detectors.dlib_detector import DlibDetector
    from live2d_head_pose.detectors.mediapipe_detector import MediaPipeDetector
"""

BACKENDS = {
    "dlib": ("live2d_head_pose.detectors.dlib_detector", "DlibDetector"),
    "mediapipe": ("live2d_head_pose.detectors.mediapipe_detector", "MediaPipeDetector"),
}


def create_detector(name: str, **kwargs):
    """
    Instantiate a landmark source by backend name.

    Args:
        name: "dlib" or "mediapipe"
        **kwargs: Passed to the detector constructor

    Returns:
        BaseLandmarkSource instance
    """
    from importlib import import_module

    if name not in BACKENDS:
        raise ValueError(f"Unknown detector {name!r}, expected one of {sorted(BACKENDS)}")
    module_name, class_name = BACKENDS[name]
    return getattr(import_module(module_name), class_name)(**kwargs)


__all__ = [
    "BACKENDS",
    "create_detector",
]
