"""CanvasWidget - Qt mouse/key events reach the controller and document."""

import pytest
from PyQt6.QtCore import QEvent, QPointF, QSize, Qt
from PyQt6.QtGui import QKeyEvent, QMouseEvent, QResizeEvent

from purikura.core.document import Mode
from purikura.core.interaction import InteractionState
from purikura.services.image_loader import ImageLoader
from purikura.widgets.canvas_widget import CanvasWidget


def mouse_event(event_type, x, y, button=Qt.MouseButton.LeftButton):
    buttons = Qt.MouseButton.NoButton if event_type == QEvent.Type.MouseButtonRelease else button
    return QMouseEvent(
        event_type,
        QPointF(x, y),
        QPointF(x, y),
        button,
        buttons,
        Qt.KeyboardModifier.NoModifier
    )


def key_event(key):
    return QKeyEvent(QEvent.Type.KeyPress, key.value, Qt.KeyboardModifier.NoModifier)


@pytest.fixture
def widget():
    canvas = CanvasWidget(loader=ImageLoader(synchronous=True))
    canvas.resize(400, 300)
    canvas.resizeEvent(QResizeEvent(QSize(400, 300), QSize(0, 0)))
    return canvas


def test_resize_follows_widget_size(widget):
    assert widget.document.viewport_size == (400, 300)
    assert widget.document.compositor.width == 400


def test_mouse_drag_draws_segments(widget):
    widget.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 10, 10))
    widget.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 20, 10))
    widget.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 20, 30))
    widget.mouseReleaseEvent(mouse_event(QEvent.Type.MouseButtonRelease, 20, 30))

    assert len(widget.document.strokes) == 2
    assert widget.controller.state is InteractionState.IDLE


def test_right_button_does_not_draw(widget):
    widget.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 10, 10, Qt.MouseButton.RightButton))
    widget.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 20, 10, Qt.MouseButton.RightButton))
    assert widget.document.strokes == ()


def test_leave_ends_gesture(widget):
    widget.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 10, 10))
    widget.leaveEvent(QEvent(QEvent.Type.Leave))
    widget.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 20, 10))
    assert widget.document.strokes == ()


def test_mode_keys(widget):
    widget.keyPressEvent(key_event(Qt.Key.Key_S))
    assert widget.document.mode is Mode.SELECT
    widget.keyPressEvent(key_event(Qt.Key.Key_D))
    assert widget.document.mode is Mode.DRAW


def test_delete_key_removes_selected_sticker(widget, make_image):
    widget.document.add_sticker(make_image(10, 10), 50, 50, 40, 40)
    widget.keyPressEvent(key_event(Qt.Key.Key_S))
    widget.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 60, 60))
    widget.mouseReleaseEvent(mouse_event(QEvent.Type.MouseButtonRelease, 60, 60))

    widget.keyPressEvent(key_event(Qt.Key.Key_Delete))

    assert widget.document.stickers == ()


def test_clear_key_removes_ink_only(widget, make_image):
    widget.document.add_sticker(make_image(10, 10), 50, 50)
    widget.mousePressEvent(mouse_event(QEvent.Type.MouseButtonPress, 10, 10))
    widget.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 20, 10))
    widget.mouseReleaseEvent(mouse_event(QEvent.Type.MouseButtonRelease, 20, 10))

    widget.keyPressEvent(key_event(Qt.Key.Key_C))

    assert widget.document.strokes == ()
    assert len(widget.document.stickers) == 1


def test_widget_grab_shows_surface(widget, make_image):
    widget.document.set_background(make_image(400, 300, "#FF0000"))
    image = widget.grab().toImage()
    assert image.pixelColor(200, 150).name() == "#ff0000"
