"""Timer-driven playback over a :class:`VideoSource`."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from vidprep.video_source import VideoMetadata, VideoSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackState:
    """Snapshot of what the controller is showing."""

    is_open: bool
    is_playing: bool
    current_frame_index: int
    frame_count: int
    fps: float


def tick_interval_ms(fps: float) -> int:
    """Timer period for one frame at ``fps``."""
    return int(1000.0 / max(1.0, fps))


class PlaybackController(QObject):
    """
    Play/pause state machine advancing the video one frame per timer tick.

    Emits:
        frame_changed (int): A new current frame is available on ``source``.
        position_changed (int): Position indicator should move (suppressed
            while the user is scrubbing).
        playing_changed (bool): Playback started or stopped.
        video_opened (object): ``VideoMetadata`` of a newly opened video.
    """

    frame_changed = Signal(int)
    position_changed = Signal(int)
    playing_changed = Signal(bool)
    video_opened = Signal(object)

    def __init__(self, source: Optional[VideoSource] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.source = source if source is not None else VideoSource()
        self.playing: bool = False
        self.scrubbing: bool = False
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.tick)

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(
            is_open=self.source.is_open,
            is_playing=self.playing,
            current_frame_index=self.source.position,
            frame_count=self.source.frame_count,
            fps=self.source.fps,
        )

    # ----------------------------------------------------------------------
    # Commands
    # ----------------------------------------------------------------------
    def open(self, path: str) -> VideoMetadata:
        """Open a video and show its first frame. Propagates ``OpenError``."""
        self.pause()
        metadata = self.source.open(path)
        self.timer.setInterval(tick_interval_ms(metadata.fps))
        self.video_opened.emit(metadata)
        self._show(self.source.seek(0))
        return metadata

    def play(self) -> None:
        """Start the playback timer; ignored with no video open."""
        if not self.source.is_open:
            return
        self._set_playing(True)

    def pause(self) -> None:
        """Stop the playback timer."""
        self._set_playing(False)

    def toggle(self) -> None:
        """Flip between playing and paused; ignored with no video open."""
        if not self.source.is_open:
            return
        self._set_playing(not self.playing)

    def seek(self, index: int) -> int:
        """Stop playback and jump to ``index``."""
        self.pause()
        return self._seek(index)

    def step(self, delta: int) -> int:
        """Stop playback and move ``delta`` frames from the current one."""
        return self.seek(self.source.position + delta)

    def restart(self) -> None:
        """Rewind to the first frame and start playing."""
        if not self.source.is_open:
            return
        self.seek(0)
        self.play()

    def begin_scrub(self) -> None:
        """The user grabbed the position indicator."""
        self.scrubbing = True
        self.pause()

    def scrub_to(self, index: int) -> int:
        """Show ``index`` while dragging without moving the indicator."""
        return self._seek(index)

    def end_scrub(self, index: int) -> int:
        """Finalize the scrub at ``index`` and resume position updates."""
        self.scrubbing = False
        return self._seek(index)

    def close(self) -> None:
        """Stop playback and release the decoder."""
        self.pause()
        self.source.release()

    # ----------------------------------------------------------------------
    # Timer
    # ----------------------------------------------------------------------
    def tick(self) -> None:
        """Advance one frame; stop at end of stream."""
        if not self.source.is_open:
            self.pause()
            return
        frame = self.source.read_next()
        if frame is None:
            logger.info("End of stream at frame %d", self.source.position)
            self.pause()
            return
        self._show(self.source.position)

    def _seek(self, index: int) -> int:
        if not self.source.is_open:
            return self.source.position
        reached = self.source.seek(index)
        self._show(reached)
        return reached

    def _show(self, index: int) -> None:
        self.frame_changed.emit(index)
        if not self.scrubbing:
            self.position_changed.emit(index)

    def _set_playing(self, on: bool) -> None:
        on = on and self.source.is_open
        if on == self.playing:
            return
        self.playing = on
        if on:
            self.timer.start()
        else:
            self.timer.stop()
        self.playing_changed.emit(on)
