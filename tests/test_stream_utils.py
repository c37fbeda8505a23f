"""Tests for single/batch/stream dispatch helpers."""

import numpy as np

from live2d_head_pose.processors.stream_utils import apply_to_stream, is_iterator


class TestIsIterator:
    def test_generator(self):
        assert is_iterator(x for x in range(3))

    def test_iterator(self):
        assert is_iterator(iter([1, 2]))

    def test_not_streams(self):
        for obj in (np.zeros((4, 4)), [1, 2], (1, 2), "abc", b"abc", {"a": 1}, {1}, 5, None):
            assert not is_iterator(obj)


class TestApplyToStream:
    def test_lazy(self):
        seen = []

        def record(item):
            seen.append(item)
            return item * 2

        stream = apply_to_stream(iter([1, 2, 3]), record)
        assert seen == []
        assert list(stream) == [2, 4, 6]
        assert seen == [1, 2, 3]

    def test_preserve_none(self):
        assert list(apply_to_stream(iter([1, None, 2]), lambda x: x + 1)) == [2, None, 3]

    def test_pass_none_through_func(self):
        result = list(apply_to_stream(iter([None]), lambda x: "seen", preserve_none=False))
        assert result == ["seen"]
