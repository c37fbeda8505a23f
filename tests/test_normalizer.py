"""Tests for landmark normalization."""

import numpy as np
import pytest

from live2d_head_pose.core.errors import DegenerateLandmarksError, LandmarkCountError
from live2d_head_pose.pose.normalizer import LandmarkNormalizer, as_landmark_array


def _points(nose=(10.0, 20.0), chin=(10.0, 70.0)):
    points = np.zeros((68, 2))
    points[30] = nose
    points[8] = chin
    return points


class TestAsLandmarkArray:
    def test_accepts_nested_lists(self):
        array = as_landmark_array([[1, 2]] * 68)
        assert array.shape == (68, 2)
        assert array.dtype == np.float64

    def test_drops_extra_columns(self):
        array = as_landmark_array(np.ones((68, 3)))
        assert array.shape == (68, 2)

    @pytest.mark.parametrize("shape", [(67, 2), (69, 2), (68,), (68, 1)])
    def test_rejects_wrong_shape(self, shape):
        with pytest.raises(LandmarkCountError):
            as_landmark_array(np.zeros(shape))

    def test_count_error_is_value_error(self):
        with pytest.raises(ValueError):
            as_landmark_array(np.zeros((5, 2)))


class TestLandmarkNormalizer:
    def test_center(self):
        normalizer = LandmarkNormalizer(200, 100)
        np.testing.assert_allclose(normalizer.center, [100.0, 50.0])

    def test_scale_from_nose_to_chin(self):
        normalizer = LandmarkNormalizer(200, 200)
        assert normalizer.scale(_points()) == pytest.approx(0.5)

    def test_nose_tip_lands_on_center(self):
        normalizer = LandmarkNormalizer(200, 200)
        normalized = normalizer.normalize(_points())
        np.testing.assert_allclose(normalized[30], [100.0, 100.0])

    def test_scale_and_offset(self):
        normalizer = LandmarkNormalizer(200, 200)
        normalized = normalizer.normalize(_points())
        # scale 0.5, offset (5, 10) - (100, 100)
        np.testing.assert_allclose(normalized[8], [100.0, 125.0])
        np.testing.assert_allclose(normalized[0], [95.0, 90.0])

    def test_chin_above_nose_uses_absolute_distance(self):
        normalizer = LandmarkNormalizer(200, 200)
        assert normalizer.scale(_points(chin=(10.0, -30.0))) == pytest.approx(0.5)

    def test_keeps_indexing(self):
        points = _points()
        points[45] = (40.0, 20.0)
        normalized = LandmarkNormalizer(200, 200).normalize(points)
        assert normalized.shape == (68, 2)
        np.testing.assert_allclose(normalized[45], [115.0, 100.0])

    def test_input_not_modified(self):
        points = _points()
        original = points.copy()
        LandmarkNormalizer().normalize(points)
        np.testing.assert_array_equal(points, original)

    def test_degenerate_nose_and_chin(self):
        with pytest.raises(DegenerateLandmarksError):
            LandmarkNormalizer().normalize(_points(chin=(10.0, 20.0)))

    def test_level_nose_and_chin_different_x(self):
        with pytest.raises(DegenerateLandmarksError):
            LandmarkNormalizer().normalize(_points(chin=(50.0, 20.0)))

    def test_wrong_count(self):
        with pytest.raises(LandmarkCountError):
            LandmarkNormalizer().normalize(np.zeros((10, 2)))
