"""Angle smoothing and application to avatar channels."""

from typing import Optional, Sequence, Tuple
import logging
import numpy as np

from ..core.base_channel import AvatarChannel
from ..core.constants import DEFAULT_INTERPOLATION_FACTOR

logger = logging.getLogger(__name__)


def wrap_angle(angle: float) -> float:
    """
    Bring an angle from [0, 360) back around zero.

    Both range checks look at the input value, so anything below -540 or
    above 540 is only moved once.
    """
    if angle > 180:
        return angle - 360
    if angle < -180:
        return angle + 360
    return angle


def remap_axes(x: float, y: float, z: float) -> Tuple[float, float, float]:
    """Swap camera-space angles into the avatar's axis convention."""
    return -y, x, -z


def repeat(t: float, length: float) -> float:
    """Loop t so that it is never larger than length and never smaller than 0."""
    return float(np.clip(t - np.floor(t / length) * length, 0.0, length))


def lerp_angle(a: float, b: float, t: float) -> float:
    """
    Interpolate from angle a toward angle b along the shortest arc.

    Args:
        a: Current angle (degrees)
        b: Target angle (degrees)
        t: Interpolation factor, clamped to [0, 1]
    """
    delta = repeat(b - a, 360.0)
    if delta > 180.0:
        delta -= 360.0
    return a + delta * float(np.clip(t, 0.0, 1.0))


class AngleSmoother:
    """
    Exponential-style angular smoothing of the head rotation.

    Every call moves each axis a fixed fraction of the way from the current
    rotation toward the new target. The rotation itself lives in the caller's
    pipeline state.
    """

    def __init__(self, interpolation_factor: float = DEFAULT_INTERPOLATION_FACTOR):
        """
        Initialize the smoother.

        Args:
            interpolation_factor: Fraction of the remaining angular distance covered per frame
        """
        self.interpolation_factor = interpolation_factor

    def target(self, angles: Sequence[float]) -> Tuple[float, float, float]:
        """Wrap raw engine angles and remap them into the avatar convention."""
        wrapped = [wrap_angle(float(a)) for a in angles]
        return remap_axes(*wrapped)

    def smooth(self,
               current: Sequence[float],
               angles: Sequence[float]) -> Tuple[float, float, float]:
        """
        Advance the smoothed rotation by one frame.

        Args:
            current: Smoothed (x, y, z) rotation from the previous frame
            angles: Raw (x, y, z) Euler angles in degrees, [0, 360)

        Returns:
            New smoothed (x, y, z) in the avatar's axis convention
        """
        goal = self.target(angles)
        x, y, z = (
            lerp_angle(float(c), g, self.interpolation_factor)
            for c, g in zip(current, goal)
        )
        return x, y, z


def apply_angles(angles: Sequence[float], channels: Sequence[Optional[AvatarChannel]]) -> None:
    """
    Write angles to their channels, clamping each to the channel range.

    Args:
        angles: One value per channel
        channels: Destination channels; None entries are skipped
    """
    for value, channel in zip(angles, channels):
        if channel is None:
            continue
        written = channel.set_value(value)
        if written != value:
            logger.debug("Clamped %s from %.2f to %.2f", channel.name, value, written)
