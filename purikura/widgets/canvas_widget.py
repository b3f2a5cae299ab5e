"""
CanvasWidget - Qt widget hosting a canvas document

Forwards left-button mouse input to the InteractionController (positions
relative to the widget, which is the surface's own rect) and paints the
compositor's surface whenever the document notifies a change.

Keyboard:
- D: draw mode
- S: select mode
- Delete/Backspace: remove the selected sticker
- C: clear ink only
"""

import logging
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QCursor, QPainter
from PyQt6.QtWidgets import QWidget

from ..config import Config
from ..core.document import Document, Mode
from ..core.geometry import Point
from ..core.interaction import InteractionController
from ..services.image_loader import ImageLoader

logger = logging.getLogger(__name__)


class CanvasWidget(QWidget):
    """
    Interactive editing surface.

    The document's viewport follows the widget size; a background already
    set keeps its placement until set_background() is called again.
    """

    def __init__(self, parent: Optional[QWidget] = None, loader: Optional[ImageLoader] = None):
        super().__init__(parent)

        self._document = Document(
            Config.DEFAULT_CANVAS_WIDTH,
            Config.DEFAULT_CANVAS_HEIGHT,
            loader=loader
        )
        self._controller = InteractionController(self._document)

        self._document.notifier.changed.connect(self._on_document_changed)
        self._setup_widget()

    def _setup_widget(self):
        """Configure the widget."""
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent)
        self.resize(Config.DEFAULT_CANVAS_WIDTH, Config.DEFAULT_CANVAS_HEIGHT)
        self._update_cursor()

    # ==================== Properties ====================

    @property
    def document(self) -> Document:
        return self._document

    @property
    def controller(self) -> InteractionController:
        return self._controller

    def _on_document_changed(self):
        self._update_cursor()
        self.update()

    def _update_cursor(self):
        if self._document.mode is Mode.DRAW:
            self.setCursor(QCursor(Qt.CursorShape.CrossCursor))
        else:
            self.setCursor(QCursor(Qt.CursorShape.ArrowCursor))

    # ==================== Painting & Resize ====================

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), QColor(Config.CANVAS_BACKGROUND))
            painter.drawImage(0, 0, self._document.compositor.surface)
        finally:
            painter.end()

    def resizeEvent(self, event):
        """Keep the surface the same size as the widget."""
        super().resizeEvent(event)
        size = event.size()
        if size.width() > 0 and size.height() > 0:
            self._document.set_viewport_size(size.width(), size.height())

    # ==================== Mouse Events ====================

    @staticmethod
    def _event_point(event) -> Point:
        pos = event.position()
        return Point(pos.x(), pos.y())

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._controller.pointer_down(self._event_point(event))
            event.accept()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        self._controller.pointer_move(self._event_point(event))
        event.accept()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._controller.pointer_up(self._event_point(event))
            event.accept()
        else:
            super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        self._controller.pointer_leave()
        super().leaveEvent(event)

    def hideEvent(self, event):
        self._controller.cancel()
        super().hideEvent(event)

    # ==================== Keyboard ====================

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_D:
            self._document.set_mode(Mode.DRAW)
        elif key == Qt.Key.Key_S:
            self._document.set_mode(Mode.SELECT)
        elif key == Qt.Key.Key_C:
            self._document.clear_strokes_only()
        elif key in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            selected_id = self._document.selected_sticker_id
            if selected_id is not None:
                self._document.remove_sticker(selected_id)
        else:
            super().keyPressEvent(event)
            return
        event.accept()


__all__ = ['CanvasWidget']
