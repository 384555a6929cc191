"""Shared pytest fixtures for vidprep tests."""

import os
from dataclasses import dataclass
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import cv2  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402


@dataclass
class Clip:
    path: Path
    frame_count: int = 20
    fps: float = 10.0
    width: int = 64
    height: int = 48


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for the whole run (offscreen platform)."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def clip(tmp_path: Path) -> Clip:
    """Create a small MJPG video; frame i has brightness i * 10."""
    clip = Clip(path=tmp_path / "clip.avi")
    fourcc = cv2.VideoWriter_fourcc(*"MJPG")
    writer = cv2.VideoWriter(str(clip.path), fourcc, clip.fps, (clip.width, clip.height))
    assert writer.isOpened()
    for i in range(clip.frame_count):
        frame = np.full((clip.height, clip.width, 3), i * 10, dtype=np.uint8)
        writer.write(frame)
    writer.release()
    return clip


@pytest.fixture
def bgr_frame() -> np.ndarray:
    frame = np.zeros((30, 40, 3), dtype=np.uint8)
    frame[:, :, 0] = 255  # blue in BGR
    return frame


class FakeCapture:
    """Stand-in for cv2.VideoCapture with scripted properties and reads."""

    def __init__(self, frames, fps=0.0, opened=True, fail_seek_reads=False):
        self.frames = list(frames)
        self.fps = fps
        self.opened = opened
        self.fail_seek_reads = fail_seek_reads
        self.pos = 0
        self.seeked = False

    def isOpened(self):  # noqa: N802
        return self.opened

    def release(self):
        self.opened = False

    def get(self, prop):
        if prop == cv2.CAP_PROP_FPS:
            return self.fps
        if prop == cv2.CAP_PROP_FRAME_COUNT:
            return float(len(self.frames))
        if prop == cv2.CAP_PROP_POS_FRAMES:
            return float(self.pos)
        if prop == cv2.CAP_PROP_FRAME_WIDTH:
            return float(self.frames[0].shape[1]) if self.frames else 0.0
        if prop == cv2.CAP_PROP_FRAME_HEIGHT:
            return float(self.frames[0].shape[0]) if self.frames else 0.0
        return 0.0

    def set(self, prop, value):
        if prop == cv2.CAP_PROP_POS_FRAMES:
            self.pos = int(value)
            self.seeked = True
        return True

    def read(self):
        if self.seeked and self.fail_seek_reads:
            return False, None
        if self.pos >= len(self.frames):
            return False, None
        frame = self.frames[self.pos]
        self.pos += 1
        return True, frame


@pytest.fixture
def make_fake_capture():
    """Build FakeCapture instances; five tiny frames unless told otherwise."""

    def make(**kwargs):
        frames = kwargs.pop("frames", [np.full((4, 6, 3), i, dtype=np.uint8) for i in range(5)])
        return FakeCapture(frames, **kwargs)

    return make
