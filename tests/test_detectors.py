"""Tests for detector selection and model download."""

import bz2
from types import SimpleNamespace

import numpy as np
import pytest
import requests

from live2d_head_pose.core.constants import MEDIAPIPE_TO_68, NUM_LANDMARKS
from live2d_head_pose.core.types import FaceRegion
from live2d_head_pose.detectors import BACKENDS, create_detector
from live2d_head_pose.detectors import model_download
from live2d_head_pose.detectors.model_download import ensure_model


# ── Mocks ──


class FakeResponse:
    def __init__(self, payload: bytes, fail: bool = False):
        self.payload = payload
        self.fail = fail
        self.headers = {"content-length": str(len(payload))}

    def raise_for_status(self):
        if self.fail:
            raise requests.HTTPError("404 Not Found")

    def iter_content(self, chunk_size=8192):
        for start in range(0, len(self.payload), chunk_size):
            yield self.payload[start:start + chunk_size]


# ── Tests ──


class TestCreateDetector:
    def test_known_backends(self):
        assert set(BACKENDS) == {"dlib", "mediapipe"}

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="haar"):
            create_detector("haar")


class TestMediaPipeMapping:
    def test_one_mesh_index_per_landmark(self):
        assert len(MEDIAPIPE_TO_68) == NUM_LANDMARKS
        assert len(set(MEDIAPIPE_TO_68)) == NUM_LANDMARKS
        assert all(0 <= i < 478 for i in MEDIAPIPE_TO_68)


class TestEnsureModel:
    def test_existing_model_is_not_downloaded(self, tmp_path, monkeypatch):
        (tmp_path / "model.dat").write_bytes(b"cached")

        def fail_get(*args, **kwargs):
            raise AssertionError("unexpected download")

        monkeypatch.setattr(model_download.requests, "get", fail_get)
        assert ensure_model("model.dat", "http://example.com/model.dat", tmp_path) == str(tmp_path / "model.dat")

    def test_download(self, tmp_path, monkeypatch):
        monkeypatch.setattr(model_download.requests, "get", lambda *a, **kw: FakeResponse(b"x" * 20000))
        path = ensure_model("model.dat", "http://example.com/model.dat", tmp_path)

        assert (tmp_path / "model.dat").read_bytes() == b"x" * 20000
        assert path == str(tmp_path / "model.dat")
        assert not (tmp_path / "model.dat.part").exists()

    def test_compressed_download(self, tmp_path, monkeypatch):
        payload = bz2.compress(b"predictor weights")
        monkeypatch.setattr(model_download.requests, "get", lambda *a, **kw: FakeResponse(payload))
        ensure_model("predictor.dat", "http://example.com/predictor.dat.bz2", tmp_path, compressed=True)

        assert (tmp_path / "predictor.dat").read_bytes() == b"predictor weights"
        assert not (tmp_path / "predictor.dat.bz2").exists()

    def test_failed_download(self, tmp_path, monkeypatch):
        monkeypatch.setattr(model_download.requests, "get", lambda *a, **kw: FakeResponse(b"", fail=True))
        with pytest.raises(RuntimeError, match="model.dat"):
            ensure_model("model.dat", "http://example.com/model.dat", tmp_path)
        assert list(tmp_path.iterdir()) == []


class TestDlibDetector:
    def test_predictor_path_is_used(self, tmp_path):
        pytest.importorskip("dlib")
        from live2d_head_pose.detectors.dlib_detector import DlibDetector

        with pytest.raises(RuntimeError):
            DlibDetector(predictor_path=str(tmp_path / "missing.dat"))


# ── Backend adapters ──


class StubRect:
    def __init__(self, left, top, right, bottom):
        self._box = (left, top, right, bottom)

    def left(self):
        return self._box[0]

    def top(self):
        return self._box[1]

    def right(self):
        return self._box[2]

    def bottom(self):
        return self._box[3]


class StubShape:
    def __init__(self, points):
        self.num_parts = len(points)
        self._points = [SimpleNamespace(x=x, y=y) for x, y in points]

    def parts(self):
        return self._points


class StubLandmarker:
    def __init__(self, faces):
        self.faces = faces
        self.timestamps = []

    def detect_for_video(self, image, timestamp_ms):
        self.timestamps.append(timestamp_ms)
        return SimpleNamespace(face_landmarks=self.faces)


def _mesh(corner_a, corner_b, fill, count=478):
    """Normalized mesh with every point on fill except the two bounding corners."""
    mesh = [SimpleNamespace(x=fill[0], y=fill[1]) for _ in range(count)]
    mesh[0] = SimpleNamespace(x=corner_a[0], y=corner_a[1])
    mesh[1] = SimpleNamespace(x=corner_b[0], y=corner_b[1])
    return mesh


class TestDlibAdapter:
    @pytest.fixture
    def detector(self):
        pytest.importorskip("dlib")
        from live2d_head_pose.detectors.dlib_detector import DlibDetector

        detector = object.__new__(DlibDetector)
        detector.upsample = 0
        return detector

    def test_regions_largest_first(self, detector, frame):
        detector.face_detector = lambda image, upsample: [
            StubRect(0, 0, 50, 50),
            StubRect(100, 100, 300, 300),
            StubRect(400, 50, 500, 150),
        ]
        regions = detector.detect(frame)

        assert [(r.left, r.top, r.right, r.bottom) for r in regions] == [
            (100, 100, 300, 300),
            (400, 50, 500, 150),
            (0, 0, 50, 50),
        ]

    def test_no_faces(self, detector, frame):
        detector.face_detector = lambda image, upsample: []
        assert detector.detect(frame) == []

    def test_shape_to_array(self, detector, frame):
        points = [(i, 2 * i) for i in range(68)]
        detector.predictor = lambda image, rect: StubShape(points)
        landmarks = detector.landmarks(frame, FaceRegion(10, 10, 200, 200))

        assert landmarks.shape == (68, 2)
        assert landmarks.dtype == np.float64
        np.testing.assert_array_equal(landmarks[5], [5.0, 10.0])

    def test_partial_shape_is_rejected(self, detector, frame):
        detector.predictor = lambda image, rect: StubShape([(0, 0)] * 5)
        assert detector.landmarks(frame, FaceRegion(10, 10, 200, 200)) is None

    def test_bgr_to_rgb(self, detector, frame):
        frame[0, 0] = (255, 0, 0)
        assert tuple(detector.preprocess_image(frame)[0, 0]) == (0, 0, 255)


class TestMediaPipeAdapter:
    @pytest.fixture
    def detector(self):
        pytest.importorskip("mediapipe")
        from live2d_head_pose.detectors.mediapipe_detector import MediaPipeDetector

        detector = object.__new__(MediaPipeDetector)
        detector.frame_counter = 0
        detector.frame_time_ms = 1000.0 / 25.0
        detector._regions = []
        detector._points = []
        return detector

    def test_mesh_scaled_to_pixels(self, detector, frame):
        detector.landmarker = StubLandmarker([_mesh((0.125, 0.25), (0.375, 0.75), (0.25, 0.5))])
        regions = detector.detect(frame)

        assert len(regions) == 1
        region = regions[0]
        assert (region.left, region.top, region.right, region.bottom) == (80, 120, 240, 360)

        points = detector.landmarks(frame, region)
        assert points.shape == (68, 2)
        # Outer lip top centre is mesh point 0
        np.testing.assert_allclose(points[51], [80.0, 120.0])
        np.testing.assert_allclose(points[30], [160.0, 240.0])

    def test_regions_largest_first(self, detector, frame):
        small = _mesh((0.125, 0.25), (0.375, 0.75), (0.25, 0.5))
        large = _mesh((0.5, 0.0), (1.0, 1.0), (0.75, 0.5))
        detector.landmarker = StubLandmarker([small, large])
        regions = detector.detect(frame)

        assert [(r.left, r.top, r.right, r.bottom) for r in regions] == [
            (320, 0, 640, 480),
            (80, 120, 240, 360),
        ]
        np.testing.assert_allclose(detector.landmarks(frame, regions[0])[30], [480.0, 240.0])
        np.testing.assert_allclose(detector.landmarks(frame, regions[1])[30], [160.0, 240.0])

    def test_equal_region_finds_points(self, detector, frame):
        detector.landmarker = StubLandmarker([_mesh((0.125, 0.25), (0.375, 0.75), (0.25, 0.5))])
        detector.detect(frame)
        assert detector.landmarks(frame, FaceRegion(80, 120, 240, 360)) is not None

    def test_unknown_region(self, detector, frame):
        detector.landmarker = StubLandmarker([_mesh((0.125, 0.25), (0.375, 0.75), (0.25, 0.5))])
        detector.detect(frame)
        assert detector.landmarks(frame, FaceRegion(0, 0, 1, 1)) is None

    def test_points_reset_between_frames(self, detector, frame):
        detector.landmarker = StubLandmarker([_mesh((0.125, 0.25), (0.375, 0.75), (0.25, 0.5))])
        region = detector.detect(frame)[0]
        detector.landmarker.faces = []

        assert detector.detect(frame) == []
        assert detector.landmarks(frame, region) is None

    def test_short_mesh_is_skipped(self, detector, frame):
        detector.landmarker = StubLandmarker([_mesh((0.1, 0.1), (0.2, 0.2), (0.15, 0.15), count=10)])
        assert detector.detect(frame) == []

    def test_timestamps_follow_frame_rate(self, detector, frame):
        detector.landmarker = StubLandmarker([])
        for _ in range(3):
            detector.detect(frame)
        assert detector.landmarker.timestamps == [0, 40, 80]

    def test_first_region_feeds_detect_single(self, detector, frame):
        small = _mesh((0.125, 0.25), (0.375, 0.75), (0.25, 0.5))
        large = _mesh((0.5, 0.0), (1.0, 1.0), (0.75, 0.5))
        detector.landmarker = StubLandmarker([small, large])
        region, points = detector.detect_single(frame)

        assert (region.left, region.right) == (320, 640)
        np.testing.assert_allclose(points[30], [480.0, 240.0])
