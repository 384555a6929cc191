"""Tests for frame to QImage conversion and fitting."""

import numpy as np
import pytest
from PySide6.QtGui import QColor

from vidprep.rendering import fit_size, frame_to_qimage, render


class TestFrameToQImage:
    def test_bgr_becomes_rgb(self, qapp, bgr_frame):
        image = frame_to_qimage(bgr_frame)
        assert (image.width(), image.height()) == (40, 30)
        assert image.pixelColor(5, 5) == QColor(0, 0, 255)

    def test_grayscale(self, qapp):
        gray = np.full((10, 20), 128, dtype=np.uint8)
        image = frame_to_qimage(gray)
        assert image.pixelColor(0, 0) == QColor(128, 128, 128)

    def test_bgra_keeps_alpha(self, qapp):
        bgra = np.zeros((8, 8, 4), dtype=np.uint8)
        bgra[:, :, 2] = 200  # red
        bgra[:, :, 3] = 255
        image = frame_to_qimage(bgra)
        assert image.pixelColor(1, 1) == QColor(200, 0, 0)

    def test_image_does_not_alias_frame(self, qapp, bgr_frame):
        image = frame_to_qimage(bgr_frame)
        bgr_frame[:] = 0
        assert image.pixelColor(5, 5) == QColor(0, 0, 255)


class TestFit:
    @pytest.mark.parametrize(
        "src, box, expected",
        [
            ((1920, 1080), (640, 640), (640, 360)),
            ((1080, 1920), (640, 640), (360, 640)),
            ((100, 50), (1000, 1000), (1000, 500)),
            ((100, 100), (0, 0), (1, 1)),
            ((0, 0), (300, 200), (300, 200)),
        ],
    )
    def test_fit_size(self, src, box, expected):
        assert fit_size(*src, *box) == expected

    def test_render_fits_box(self, qapp, bgr_frame):
        image = render(bgr_frame, 200, 200)
        assert (image.width(), image.height()) == fit_size(40, 30, 200, 200)

    def test_render_letterboxes_tall_box(self, qapp, bgr_frame):
        image = render(bgr_frame, 80, 500)
        assert (image.width(), image.height()) == (80, 60)

    def test_render_degenerate_box(self, qapp, bgr_frame):
        image = render(bgr_frame, 0, 0)
        assert (image.width(), image.height()) == (1, 1)
