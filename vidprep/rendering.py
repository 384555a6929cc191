"""Conversion of decoded OpenCV frames into Qt images."""
from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np
from PySide6.QtCore import Qt
from PySide6.QtGui import QImage


def frame_to_qimage(frame: np.ndarray) -> QImage:
    """Convert a BGR, BGRA or grayscale frame into an owned ``QImage``."""
    if frame.ndim == 2 or frame.shape[2] == 1:
        rgb = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
        fmt = QImage.Format_RGB888
    elif frame.shape[2] == 4:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGRA2RGBA)
        fmt = QImage.Format_RGBA8888
    else:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        fmt = QImage.Format_RGB888
    rgb = np.ascontiguousarray(rgb)
    height, width = rgb.shape[:2]
    bytes_per_line = rgb.strides[0]
    # copy() detaches the image from the numpy buffer, which is freed on return.
    return QImage(rgb.data, width, height, bytes_per_line, fmt).copy()


def fit_size(src_width: int, src_height: int, box_width: int, box_height: int) -> Tuple[int, int]:
    """Largest size inside the box keeping the source aspect ratio."""
    if src_width <= 0 or src_height <= 0:
        return max(1, box_width), max(1, box_height)
    scale = min(box_width / src_width, box_height / src_height)
    return max(1, int(src_width * scale)), max(1, int(src_height * scale))


def render(frame: np.ndarray, width: int, height: int) -> QImage:
    """Render ``frame`` scaled to fit ``width`` x ``height``."""
    image = frame_to_qimage(frame)
    target_w, target_h = fit_size(image.width(), image.height(), width, height)
    return image.scaled(target_w, target_h, Qt.IgnoreAspectRatio, Qt.SmoothTransformation)
