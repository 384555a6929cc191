"""
Video source backed by ``cv2.VideoCapture``.

The source owns a single decoder handle and the most recently decoded frame.
Every read or seek replaces ``current_frame`` with a new array; callers may
keep a reference to an old frame but must not mutate it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import cv2
import numpy as np

from vidprep.errors import OpenError

logger = logging.getLogger(__name__)

DEFAULT_FPS = 30.0


@dataclass
class VideoMetadata:
    """Container for basic video metadata."""

    path: str
    width: int
    height: int
    fps: float
    frame_count: int
    duration_sec: float


class VideoSource:
    """Sequential and random access to the frames of one video file."""

    def __init__(self, capture_factory: Callable[[str], cv2.VideoCapture] = cv2.VideoCapture) -> None:
        self._capture_factory = capture_factory
        self._capture: Optional[cv2.VideoCapture] = None
        self.metadata: Optional[VideoMetadata] = None
        self.fps: float = DEFAULT_FPS
        self.frame_count: int = 0
        self.position: int = 0
        self.current_frame: Optional[np.ndarray] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def open(self, path: str) -> VideoMetadata:
        """Open ``path``, releasing any previous video first.

        Raises:
            OpenError: if the decoder cannot open the file. No video is open
                afterwards.
        """
        self.release()

        cap = self._capture_factory(path)
        if not cap.isOpened():
            cap.release()
            logger.warning("Failed to open video %s", path)
            raise OpenError(f"Could not open video: {path}")

        fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
        if fps <= 0.0:
            fps = DEFAULT_FPS
        frame_count = max(0, int(cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0))
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)

        self._capture = cap
        self.fps = fps
        self.frame_count = frame_count
        self.position = 0
        self.metadata = VideoMetadata(
            path=path,
            width=width,
            height=height,
            fps=fps,
            frame_count=frame_count,
            duration_sec=frame_count / fps,
        )
        logger.info(
            "Opened %s (%dx%d, %.2f fps, %d frames)", path, width, height, fps, frame_count
        )
        return self.metadata

    def release(self) -> None:
        """Close the decoder and forget the current frame."""
        if self._capture is not None:
            self._capture.release()
            self._capture = None
        self.metadata = None
        self.frame_count = 0
        self.position = 0
        self.current_frame = None

    def read_next(self) -> Optional[np.ndarray]:
        """Decode the next sequential frame, or return ``None`` at end of stream."""
        if not self.is_open:
            return None
        ok, frame = self._capture.read()
        if not ok or frame is None:
            return None
        self._accept(frame, self.position + 1 if self.current_frame is not None else 0)
        return frame

    def seek(self, index: int) -> int:
        """Jump to ``index`` (clamped) and return the index actually reached.

        Decoders may land near rather than on the requested frame; the
        position reported after the read wins.
        """
        if not self.is_open:
            return self.position
        target = max(0, min(index, self.frame_count - 1))
        self._capture.set(cv2.CAP_PROP_POS_FRAMES, target)
        ok, frame = self._capture.read()
        if not ok or frame is None:
            logger.warning("Unable to read frame %d", target)
            return self.position
        self._accept(frame, target)
        if self.position != target:
            logger.debug("Seek to %d landed on %d", target, self.position)
        return self.position

    def _accept(self, frame: np.ndarray, expected: int) -> None:
        reported = int(self._capture.get(cv2.CAP_PROP_POS_FRAMES)) - 1
        self.position = reported if reported >= 0 else expected
        self.current_frame = frame
