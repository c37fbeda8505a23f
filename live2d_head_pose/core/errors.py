"""Exception types raised by the head pose pipeline."""


class HeadPoseError(Exception):
    """Base class for all head pose pipeline errors."""


class LandmarkCountError(HeadPoseError, ValueError):
    """Raised when a landmark set does not hold exactly 68 points."""


class IntrinsicsError(HeadPoseError, RuntimeError):
    """Raised when the pose solver is used without camera intrinsics."""


class DegenerateLandmarksError(HeadPoseError):
    """
    Raised when landmarks cannot be normalized.
    
    The nose tip and chin share the same vertical position, so the
    normalization scale collapses to zero.
    """


class ConfigError(HeadPoseError, ValueError):
    """Raised for unknown or out-of-range configuration values."""
