"""Shared fixtures."""

import numpy as np
import pytest

from tests.synthetic import facing_rvec, make_landmarks


@pytest.fixture
def frontal_landmarks():
    return make_landmarks(facing_rvec(), [0.0, 0.0, 500.0])


@pytest.fixture
def frame():
    return np.zeros((480, 640, 3), dtype=np.uint8)


@pytest.fixture
def video_file(tmp_path):
    """Five 64x48 frames, left half white, right half black."""
    import cv2

    path = tmp_path / "clip.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 10.0, (64, 48))
    image = np.zeros((48, 64, 3), dtype=np.uint8)
    image[:, :32] = 255
    for _ in range(5):
        writer.write(image)
    writer.release()
    return path
