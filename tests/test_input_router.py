"""Tests for key and mouse routing."""

import pytest
from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import QKeyEvent, QMouseEvent
from PySide6.QtWidgets import QLabel

from vidprep import input_router
from vidprep.input_router import InputRouter


@pytest.fixture
def router(qapp):
    video = QLabel()
    router = InputRouter(video)
    calls = []
    for name in (input_router.TOGGLE_PLAY, input_router.SAVE_FRAME, input_router.STEP_BACK, input_router.STEP_FORWARD):
        router.register(name, lambda name=name: calls.append(name))
    router.calls = calls
    yield router
    video.deleteLater()


def key_press(key):
    return QKeyEvent(QEvent.KeyPress, key, Qt.NoModifier)


def mouse_press(button):
    return QMouseEvent(QEvent.MouseButtonPress, QPointF(2, 2), QPointF(2, 2), button, button, Qt.NoModifier)


class TestKeys:
    @pytest.mark.parametrize(
        "key, command",
        [
            (Qt.Key_Space, input_router.TOGGLE_PLAY),
            (Qt.Key_S, input_router.SAVE_FRAME),
            (Qt.Key_Left, input_router.STEP_BACK),
            (Qt.Key_Right, input_router.STEP_FORWARD),
        ],
    )
    def test_recognized_keys_are_consumed(self, router, key, command):
        other = QLabel()
        assert router.eventFilter(other, key_press(key)) is True
        assert router.calls == [command]

    def test_other_keys_pass_through(self, router):
        assert router.eventFilter(QLabel(), key_press(Qt.Key_A)) is False
        assert router.calls == []

    def test_unregistered_command_passes_through(self, qapp):
        router = InputRouter()
        assert router.eventFilter(QLabel(), key_press(Qt.Key_Space)) is False


class TestMouse:
    def test_left_click_toggles(self, router):
        assert router.eventFilter(router.video_widget, mouse_press(Qt.LeftButton)) is True
        assert router.calls == [input_router.TOGGLE_PLAY]

    def test_right_click_saves(self, router):
        assert router.eventFilter(router.video_widget, mouse_press(Qt.RightButton)) is True
        assert router.calls == [input_router.SAVE_FRAME]

    def test_clicks_elsewhere_ignored(self, router):
        assert router.eventFilter(QLabel(), mouse_press(Qt.LeftButton)) is False
        assert router.calls == []
