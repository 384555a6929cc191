"""
Saving frames as sequentially numbered images.

Numbering continues from the largest number embedded in any image filename
already present in the save directory, so frames saved by earlier sessions
(or copied in by hand) are never overwritten.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Optional

import cv2
import numpy as np

from vidprep.errors import MissingSaveDirError, WriteError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp")
_DIGITS = re.compile(r"\d+")


def largest_number_in_dir(directory: str) -> int:
    """Largest run of digits in the base names of image files, or 0."""
    if not directory or not os.path.isdir(directory):
        return 0
    largest = 0
    for entry in os.scandir(directory):
        if not entry.is_file(follow_symlinks=False):
            continue
        base, ext = os.path.splitext(entry.name)
        if ext.lower() not in IMAGE_EXTENSIONS:
            continue
        for match in _DIGITS.findall(base):
            largest = max(largest, int(match))
    return largest


def compute_next_index(directory: str) -> int:
    """Index the next saved frame should use in ``directory``."""
    return largest_number_in_dir(directory) + 1


def image_filename(index: int) -> str:
    return f"image_{index:04d}.png"


class FrameExporter:
    """Writes frames into ``save_dir`` and keeps the export counter."""

    def __init__(self, save_dir: str = "", next_index: int = 1) -> None:
        self.save_dir = save_dir
        self.next_index = next_index

    def set_save_dir(self, directory: str) -> int:
        """Switch to ``directory`` and re-derive the counter from its contents."""
        self.save_dir = directory
        self.next_index = compute_next_index(directory)
        return self.next_index

    def save(self, frame: Optional[np.ndarray]) -> str:
        """Write ``frame`` as the next numbered PNG and return its path.

        Raises:
            MissingSaveDirError: no save directory has been chosen.
            WriteError: the directory could not be created or the image
                could not be encoded or written. The counter is unchanged.
        """
        if not self.save_dir:
            raise MissingSaveDirError("Please select a save directory first.")
        if frame is None or frame.size == 0:
            raise WriteError("No frame to save.")

        try:
            os.makedirs(self.save_dir, exist_ok=True)
        except OSError as exc:
            raise WriteError(f"Cannot create directory {self.save_dir}: {exc}") from exc

        index = max(self.next_index, compute_next_index(self.save_dir))
        out_path = os.path.join(self.save_dir, image_filename(index))
        try:
            ok = cv2.imwrite(out_path, frame)
        except cv2.error as exc:
            raise WriteError(f"Failed to save frame to {out_path}: {exc}") from exc
        if not ok:
            raise WriteError(f"Failed to save frame to {out_path}")

        self.next_index = index + 1
        logger.info("Saved %s", out_path)
        return out_path
