"""Streaming utilities for unified single/batch/stream processing."""

from typing import Any, Iterator, Callable, TypeVar
import numpy as np

T = TypeVar('T')


def is_iterator(obj: Any) -> bool:
    """
    Check if object should be treated as a stream of frames.

    Arrays, strings, mappings and plain containers are not streams; lists are
    handled as batches by callers.

    Args:
        obj: Object to check

    Returns:
        True if object is an iterable that should be consumed lazily
    """
    if isinstance(obj, (np.ndarray, str, bytes, dict, list, tuple, set)):
        return False

    return hasattr(obj, '__iter__')


def apply_to_stream(stream: Iterator[T],
                    func: Callable[[T], Any],
                    preserve_none: bool = True) -> Iterator[Any]:
    """
    Lazily apply a function to each item in a stream.

    Args:
        stream: Input stream
        func: Function to apply to each item
        preserve_none: If True, None items are yielded as None without calling func

    Yields:
        func(item) for each stream item
    """
    for item in stream:
        if item is None and preserve_none:
            yield None
        else:
            yield func(item)
