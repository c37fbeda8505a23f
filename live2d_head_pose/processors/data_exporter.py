"""Streaming JSON export of per-frame tracking results."""

from dataclasses import asdict
from typing import Dict, Any, Optional, TextIO
from pathlib import Path
import json
import logging

from ..core.types import FrameResult

logger = logging.getLogger(__name__)


class DataExporter:
    """
    Write frame results to a JSON file as they are produced.

    Layout: {"metadata": {...}, "frames": [...], "frame_count": N}. The count
    is written last so nothing has to be rewritten in place.
    """

    def __init__(self, output_path: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Initialize data exporter.

        Args:
            output_path: Output file path
            metadata: Optional metadata to include
        """
        self.output_path: Path = Path(output_path)
        self.metadata: Dict[str, Any] = metadata or {}
        self.file: Optional[TextIO] = None
        self.frame_count: int = 0

    def __enter__(self) -> 'DataExporter':
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', encoding='utf-8')
        self.file.write('{\n  "metadata": ')
        self.file.write(json.dumps(self.metadata))
        self.file.write(',\n  "frames": [')
        return self

    def __exit__(self, exc_type: Optional[type], exc_val: Optional[Exception], exc_tb: Optional[Any]) -> None:
        if self.file:
            self.file.write('\n  ],\n')
            self.file.write(f'  "frame_count": {self.frame_count}\n}}\n')
            self.file.close()
            self.file = None
            logger.info("Wrote %d frames to %s", self.frame_count, self.output_path)

    def write_result(self, result: FrameResult) -> None:
        """Append one frame result."""
        if self.file is None:
            raise RuntimeError("DataExporter must be used as a context manager")

        if self.frame_count:
            self.file.write(',')
        item = asdict(result)
        item['angles'] = [round(a, 4) for a in result.angles]
        self.file.write('\n    ' + json.dumps(item))
        self.frame_count += 1

        # Keep the file readable while a live session is still running
        self.file.flush()
