"""App-wide keyboard and mouse routing to named commands."""
from __future__ import annotations

from typing import Callable, Dict, Optional

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtWidgets import QWidget

TOGGLE_PLAY = "toggle_play"
SAVE_FRAME = "save_frame"
STEP_BACK = "step_back"
STEP_FORWARD = "step_forward"

KEY_COMMANDS = {
    int(Qt.Key_Space): TOGGLE_PLAY,
    int(Qt.Key_S): SAVE_FRAME,
    int(Qt.Key_Left): STEP_BACK,
    int(Qt.Key_Right): STEP_FORWARD,
}


def command_for_key(key) -> Optional[str]:
    return KEY_COMMANDS.get(int(key))


def command_for_button(button) -> Optional[str]:
    if button == Qt.LeftButton:
        return TOGGLE_PLAY
    if button == Qt.RightButton:
        return SAVE_FRAME
    return None


class InputRouter(QObject):
    """
    Event filter that turns key presses anywhere in the application, and
    clicks on the video widget, into command callbacks.

    Recognized events are consumed so that, for example, Space does not also
    click whichever button has focus.
    """

    def __init__(self, video_widget: Optional[QWidget] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.video_widget = video_widget
        self.commands: Dict[str, Callable[[], None]] = {}

    def register(self, name: str, handler: Callable[[], None]) -> None:
        self.commands[name] = handler

    def dispatch(self, name: Optional[str]) -> bool:
        """Run the handler for ``name``; False if nothing is registered."""
        handler = self.commands.get(name) if name else None
        if handler is None:
            return False
        handler()
        return True

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # noqa: N802
        etype = event.type()
        if etype == QEvent.MouseButtonPress and self.video_widget is not None and obj is self.video_widget:
            if self.dispatch(command_for_button(event.button())):
                return True
        elif etype == QEvent.KeyPress:
            if self.dispatch(command_for_key(event.key())):
                return True
        return super().eventFilter(obj, event)
