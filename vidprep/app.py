"""
Main window of the Video Dataset Preparation Tool (PySide6).

Controls:
- Space or left click on the video: play / pause
- S or right click on the video: save the current frame
- Left / Right arrows: step one frame back / forward
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from PySide6.QtCore import QEasingCurve, QPropertyAnimation, QSize, Qt, QTimer
from PySide6.QtGui import QCloseEvent, QColor, QPalette, QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QGraphicsOpacityEffect,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSizePolicy,
    QSlider,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from vidprep import input_router
from vidprep.config_store import Config, ConfigStore
from vidprep.errors import MissingSaveDirError, OpenError, WriteError
from vidprep.exporter import FrameExporter
from vidprep.input_router import InputRouter
from vidprep.playback import PlaybackController
from vidprep.rendering import render
from vidprep.video_source import VideoMetadata

logger = logging.getLogger(__name__)

VIDEO_FILTER = "Videos (*.mp4 *.avi *.mkv *.mov *.m4v *.webm);;All Files (*)"

CHIP_STYLE = "QLabel {{ background: {color}; color: white; border-radius: 6px; padding: 2px 6px; }}"
CHIP_IDLE = "#4287f5"
CHIP_SAVED = "#2ecc71"
OVERLAY_STYLE = (
    "QLabel { color: white; font: 700 72px 'Segoe UI', 'Ubuntu', sans-serif; background: transparent; }"
)
PLAY_GLYPH = "▶"
PAUSE_GLYPH = "⏸"


class FrameToolWindow(QMainWindow):
    """Main application window: scrub a video and save frames as a dataset."""

    def __init__(self, config_store: ConfigStore, video_path: Optional[str] = None) -> None:
        super().__init__()
        self.setWindowTitle("Video Dataset Preparation Tool")
        self.resize(1100, 760)
        self._apply_dark_theme()

        self.config_store = config_store
        self.config: Config = config_store.load()
        self.controller = PlaybackController(parent=self)
        self.exporter = FrameExporter(self.config.save_dir, self.config.next_image)

        self._build_ui()
        self._build_overlay()

        self.controller.frame_changed.connect(self._on_frame_changed)
        self.controller.position_changed.connect(self._on_position_changed)
        self.controller.playing_changed.connect(self._on_playing_changed)
        self.controller.video_opened.connect(self._on_video_opened)

        self.router = InputRouter(self.preview_label, parent=self)
        self.router.register(input_router.TOGGLE_PLAY, self.toggle_play)
        self.router.register(input_router.SAVE_FRAME, self.save_current_frame)
        self.router.register(input_router.STEP_BACK, lambda: self.step_frames(-1))
        self.router.register(input_router.STEP_FORWARD, lambda: self.step_frames(1))
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self.router)

        self._restore_state(video_path)

    def _apply_dark_theme(self) -> None:
        """Set a simple dark palette."""
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(40, 40, 40))
        dark_palette.setColor(QPalette.WindowText, Qt.white)
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.Text, Qt.white)
        dark_palette.setColor(QPalette.Button, QColor(60, 60, 60))
        dark_palette.setColor(QPalette.ButtonText, Qt.white)
        dark_palette.setColor(QPalette.Highlight, QColor(90, 120, 200))
        dark_palette.setColor(QPalette.HighlightedText, Qt.black)
        self.setPalette(dark_palette)

    def _build_ui(self) -> None:
        """Construct all widgets and layouts."""
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)

        # Source / destination
        paths_layout = QHBoxLayout()
        self.btn_select_video = QPushButton("Select Video")
        self.video_path_label = QLabel("No video selected")
        self.btn_select_dir = QPushButton("Select Save Dir")
        self.save_dir_label = QLabel("No save directory")
        paths_layout.addWidget(self.btn_select_video)
        paths_layout.addWidget(self.video_path_label, stretch=1)
        paths_layout.addWidget(self.btn_select_dir)
        paths_layout.addWidget(self.save_dir_label, stretch=1)
        main_layout.addLayout(paths_layout)

        # Preview area; frames are scaled manually in _render_current()
        self.preview_label = QLabel("Open a video to begin.")
        self.preview_label.setAlignment(Qt.AlignCenter)
        self.preview_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.preview_label.setMinimumSize(QSize(1, 1))
        self.preview_label.setScaledContents(False)
        self.preview_label.setContextMenuPolicy(Qt.NoContextMenu)
        self.preview_label.setStyleSheet("QLabel { background-color: #222; }")
        main_layout.addWidget(self.preview_label, stretch=1)

        # Timeline
        self.slider = QSlider(Qt.Horizontal)
        self.slider.setMinimum(0)
        self.slider.setMaximum(0)
        main_layout.addWidget(self.slider)

        # Navigation controls
        controls_layout = QHBoxLayout()
        self.btn_prev = QPushButton("Prev Frame")
        self.btn_play = QPushButton("Play")
        self.btn_next = QPushButton("Next Frame")
        self.btn_restart = QPushButton("Restart")
        self.frame_info_label = QLabel("Frame: 0 / 0")
        self.next_image_label = QLabel("Next image: 1")
        self.next_image_label.setStyleSheet(CHIP_STYLE.format(color=CHIP_IDLE))
        controls_layout.addWidget(self.btn_prev)
        controls_layout.addWidget(self.btn_play)
        controls_layout.addWidget(self.btn_next)
        controls_layout.addWidget(self.btn_restart)
        controls_layout.addStretch(1)
        controls_layout.addWidget(self.frame_info_label)
        controls_layout.addWidget(self.next_image_label)
        main_layout.addLayout(controls_layout)

        # Status bar
        self.status = QStatusBar()
        self.setStatusBar(self.status)
        self.status.showMessage("Idle")

        self.flash_timer = QTimer(self)
        self.flash_timer.setSingleShot(True)
        self.flash_timer.timeout.connect(
            lambda: self.next_image_label.setStyleSheet(CHIP_STYLE.format(color=CHIP_IDLE))
        )

        # Connections
        self.btn_select_video.clicked.connect(self.select_video)
        self.btn_select_dir.clicked.connect(self.select_save_dir)
        self.btn_play.clicked.connect(self.toggle_play)
        self.btn_prev.clicked.connect(lambda: self.step_frames(-1))
        self.btn_next.clicked.connect(lambda: self.step_frames(1))
        self.btn_restart.clicked.connect(self.controller.restart)
        self.slider.sliderPressed.connect(self.controller.begin_scrub)
        self.slider.sliderMoved.connect(self.controller.scrub_to)
        self.slider.sliderReleased.connect(lambda: self.controller.end_scrub(self.slider.value()))
        self.btn_play.setFocus()

    def _build_overlay(self) -> None:
        """Centered play/pause glyph that fades in and out over the preview."""
        self.overlay = QLabel(self.preview_label)
        self.overlay.setAttribute(Qt.WA_TransparentForMouseEvents)
        self.overlay.setAlignment(Qt.AlignCenter)
        self.overlay.setStyleSheet(OVERLAY_STYLE)
        self.overlay_effect = QGraphicsOpacityEffect(self.overlay)
        self.overlay_effect.setOpacity(0.0)
        self.overlay.setGraphicsEffect(self.overlay_effect)
        self.overlay_fade = QPropertyAnimation(self.overlay_effect, b"opacity", self)
        self.overlay_fade.setEasingCurve(QEasingCurve.OutQuad)
        self.overlay_fade.finished.connect(self._on_overlay_fade_finished)
        self.overlay_hold = QTimer(self)
        self.overlay_hold.setSingleShot(True)
        self.overlay_hold.timeout.connect(lambda: self._fade_overlay(1.0, 0.0, 350))
        self.overlay.hide()

    # ----------------------------------------------------------------------
    # Startup / persistence
    # ----------------------------------------------------------------------
    def _restore_state(self, video_path: Optional[str]) -> None:
        """Reflect the loaded config and reopen the last video (paused)."""
        if self.config.save_dir:
            self.save_dir_label.setText(self.config.save_dir)
            self.exporter.set_save_dir(self.config.save_dir)
        else:
            self.exporter.next_index = 1
        self._sync_next_image()

        path = video_path or self.config.last_video
        if path and os.path.isfile(path):
            self.load_video(path)
        elif path:
            self.video_path_label.setText(path)

    def _sync_next_image(self) -> None:
        """Mirror the export counter into the config and labels."""
        self.config.next_image = self.exporter.next_index
        self._update_info_labels()

    def _save_config(self) -> None:
        """Write the current config to disk."""
        self.config_store.save(self.config)

    # ----------------------------------------------------------------------
    # Commands
    # ----------------------------------------------------------------------
    def select_video(self) -> None:
        """Pick a video file via dialog."""
        start_dir = os.path.dirname(self.config.last_video) if self.config.last_video else os.path.expanduser("~")
        path, _ = QFileDialog.getOpenFileName(self, "Select Video", start_dir, VIDEO_FILTER)
        if not path:
            return
        self.load_video(path)

    def load_video(self, path: str) -> bool:
        """Open ``path`` and remember it; reports failures to the user."""
        try:
            self.controller.open(path)
        except OpenError as exc:
            self._clear_preview()
            self.video_path_label.setText("No video selected")
            self._warn("Error", f"Failed to open video.\n{exc}")
            return False
        self.config.last_video = path
        self.video_path_label.setText(path)
        self._save_config()
        return True

    def select_save_dir(self) -> None:
        """Pick the directory saved frames are written to."""
        start_dir = self.config.save_dir or os.path.expanduser("~")
        directory = QFileDialog.getExistingDirectory(self, "Select Save Directory", start_dir)
        if not directory:
            return
        self.set_save_dir(directory)

    def set_save_dir(self, directory: str) -> None:
        """Use ``directory`` for saved frames and renumber from its contents."""
        self.config.save_dir = directory
        self.save_dir_label.setText(directory)
        self.exporter.set_save_dir(directory)
        self._sync_next_image()
        self._save_config()

    def toggle_play(self) -> None:
        """Play or pause playback."""
        self.controller.toggle()

    def step_frames(self, delta: int) -> None:
        """Pause and move ``delta`` frames."""
        self.controller.step(delta)

    def save_current_frame(self) -> Optional[str]:
        """Write the displayed frame as the next numbered image."""
        frame = self.controller.source.current_frame
        if frame is None:
            return None
        try:
            out_path = self.exporter.save(frame)
        except MissingSaveDirError as exc:
            self._inform("Save directory required", str(exc))
            return None
        except WriteError as exc:
            logger.warning("%s", exc)
            self._warn("Save failed", f"Could not save image.\n{exc}")
            return None

        self._sync_next_image()
        self._save_config()
        self._flash_next_image_label()
        self.status.showMessage(f"Saved: {os.path.basename(out_path)}", 3000)
        return out_path

    # ----------------------------------------------------------------------
    # Controller callbacks
    # ----------------------------------------------------------------------
    def _on_video_opened(self, metadata: VideoMetadata) -> None:
        """Size the slider for the new video and show its metadata."""
        last = max(0, metadata.frame_count - 1)
        self.slider.setMaximum(last)
        self.slider.setSingleStep(1)
        self.slider.setPageStep(max(1, metadata.frame_count // 20))
        self.status.showMessage(
            f"Loaded {os.path.basename(metadata.path)}: {metadata.width} x {metadata.height}, "
            f"{metadata.fps:.2f} fps, {metadata.duration_sec:.2f} s"
        )

    def _on_frame_changed(self, index: int) -> None:
        """Redraw the preview for the new current frame."""
        self._render_current()
        self._update_info_labels()

    def _on_position_changed(self, index: int) -> None:
        """Move the slider to ``index``."""
        self.slider.setValue(index)

    def _on_playing_changed(self, playing: bool) -> None:
        """Update the play button and flash the overlay glyph."""
        self.btn_play.setText("Pause" if playing else "Play")
        self.btn_play.setToolTip("Pause" if playing else "Play")
        self._show_overlay_glyph(PLAY_GLYPH if playing else PAUSE_GLYPH)

    # ----------------------------------------------------------------------
    # Display helpers
    # ----------------------------------------------------------------------
    def _render_current(self) -> None:
        """Draw the current frame fitted to the preview label."""
        frame = self.controller.source.current_frame
        if frame is None:
            return
        size = self.preview_label.size()
        image = render(frame, size.width(), size.height())
        self.preview_label.setPixmap(QPixmap.fromImage(image))

    def _clear_preview(self) -> None:
        """Show the empty-preview placeholder."""
        self.preview_label.clear()
        self.preview_label.setText("Open a video to begin.")
        self.slider.setMaximum(0)
        self._update_info_labels()

    def _update_info_labels(self) -> None:
        """Refresh the frame and next-image labels."""
        state = self.controller.state
        self.frame_info_label.setText(f"Frame: {state.current_frame_index} / {state.frame_count}")
        self.next_image_label.setText(f"Next image: {self.exporter.next_index}")

    def _flash_next_image_label(self) -> None:
        """Briefly turn the next-image chip green after a save."""
        self.next_image_label.setStyleSheet(CHIP_STYLE.format(color=CHIP_SAVED))
        self.flash_timer.start(300)

    def _center_overlay(self) -> None:
        self.overlay.adjustSize()
        parent = self.preview_label.size()
        self.overlay.move(
            (parent.width() - self.overlay.width()) // 2,
            (parent.height() - self.overlay.height()) // 2,
        )

    def _show_overlay_glyph(self, glyph: str) -> None:
        self.overlay.setText(glyph)
        self._center_overlay()
        self.overlay.show()
        self._fade_overlay(0.0, 1.0, 120)
        self.overlay_hold.start(450)

    def _fade_overlay(self, start: float, end: float, duration_ms: int) -> None:
        self.overlay_fade.stop()
        self.overlay_fade.setDuration(duration_ms)
        self.overlay_fade.setStartValue(start)
        self.overlay_fade.setEndValue(end)
        self.overlay_fade.start()

    def _on_overlay_fade_finished(self) -> None:
        if self.overlay_effect.opacity() == 0.0:
            self.overlay.hide()

    def _warn(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)

    def _inform(self, title: str, message: str) -> None:
        QMessageBox.information(self, title, message)

    # ----------------------------------------------------------------------
    # Qt events
    # ----------------------------------------------------------------------
    def resizeEvent(self, event) -> None:  # type: ignore[override]
        """Keep the overlay centered and the frame fitted to the preview."""
        super().resizeEvent(event)
        self._center_overlay()
        self._render_current()

    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        """Persist state and release the decoder on exit."""
        self._save_config()
        self.controller.close()
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(self.router)
        super().closeEvent(event)
