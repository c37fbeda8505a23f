"""Avatar rig channel interface."""

from abc import ABC, abstractmethod
from typing import List


class AvatarChannel(ABC):
    """
    A named, ranged scalar parameter on an avatar rig.

    The rig owns the underlying parameter; the tracker only holds a handle
    and writes clamped values into it once per frame.
    """

    def __init__(self, name: str, minimum: float, maximum: float) -> None:
        if minimum > maximum:
            raise ValueError(f"Channel {name!r} has minimum {minimum} above maximum {maximum}")
        self.name = name
        self.minimum = minimum
        self.maximum = maximum

    def clamp(self, value: float) -> float:
        """Clamp a value into the channel range."""
        return min(max(value, self.minimum), self.maximum)

    def set_value(self, value: float) -> float:
        """
        Clamp and write a value.

        Args:
            value: Requested value

        Returns:
            The value actually written
        """
        clamped = self.clamp(value)
        self._write(clamped)
        return clamped

    @abstractmethod
    def _write(self, value: float) -> None:
        """Store an already-clamped value in the rig."""
        pass


class ParameterChannel(AvatarChannel):
    """In-memory channel that records what was written to it."""

    def __init__(self, name: str, minimum: float, maximum: float, value: float = 0.0) -> None:
        super().__init__(name, minimum, maximum)
        self.value = value
        self.history: List[float] = []

    def _write(self, value: float) -> None:
        self.value = value
        self.history.append(value)
