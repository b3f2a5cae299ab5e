"""
Compositor - Full redraw of a document onto its raster surface

Paint order is fixed: background photo, then ink segments in the order
they were drawn, then stickers bottom to top. The surface is cleared and
repainted completely on every call, so its pixels are always a pure
function of the document state.
"""

from typing import TYPE_CHECKING, Iterable

import numpy as np
from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QColor, QImage, QPainter, QPen

from ..config import Config
from ..utils.image_utils import qimage_to_array
from .geometry import InvalidDimension

if TYPE_CHECKING:
    from .document import BackgroundPlacement, Document, Sticker, Stroke


def create_stroke_pen(color: str, width: float) -> QPen:
    """Create pen for an ink segment (round caps and joins)."""
    pen = QPen(QColor(color), width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def create_selection_pen() -> QPen:
    """Create dashed pen for the selected sticker outline."""
    pen = QPen(QColor(Config.SELECTION_OUTLINE_COLOR), Config.SELECTION_OUTLINE_WIDTH, Qt.PenStyle.DashLine)
    pen.setJoinStyle(Qt.PenJoinStyle.MiterJoin)
    return pen


class Compositor:
    """
    Owns the raster surface and paints documents onto it.

    No other component keeps a reference to the surface; consumers paint
    it immediately (surface) or take a detached copy (snapshot).
    """

    SURFACE_FORMAT = QImage.Format.Format_ARGB32_Premultiplied

    def __init__(self, width: int, height: int):
        self._surface = self._create_surface(width, height)

    @classmethod
    def _create_surface(cls, width: int, height: int) -> QImage:
        if width <= 0 or height <= 0:
            raise InvalidDimension(f"Surface size must be positive, got {width}x{height}")
        surface = QImage(int(width), int(height), cls.SURFACE_FORMAT)
        surface.fill(Qt.GlobalColor.transparent)
        return surface

    # ==================== Surface Access ====================

    @property
    def width(self) -> int:
        return self._surface.width()

    @property
    def height(self) -> int:
        return self._surface.height()

    @property
    def surface(self) -> QImage:
        return self._surface

    def snapshot(self) -> QImage:
        """Detached copy of the current pixels."""
        return self._surface.copy()

    def to_array(self) -> np.ndarray:
        """Current pixels as an RGBA uint8 array of shape (height, width, 4)."""
        return qimage_to_array(self._surface)

    def resize(self, width: int, height: int):
        """Replace the surface with a blank one of the new size."""
        self._surface = self._create_surface(width, height)

    # ==================== Painting ====================

    def repaint(self, document: 'Document'):
        """Clear the surface and paint every layer of document."""
        self._surface.fill(Qt.GlobalColor.transparent)

        painter = QPainter(self._surface)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)

            self._paint_background(painter, document.background)
            self._paint_strokes(painter, document.strokes)
            self._paint_stickers(painter, document.stickers)
        finally:
            painter.end()

    def _paint_background(self, painter: QPainter, background: 'BackgroundPlacement'):
        rect = background.rect
        if rect is None:
            return
        painter.drawImage(QRectF(rect.x, rect.y, rect.width, rect.height), background.image)

    def _paint_strokes(self, painter: QPainter, strokes: Iterable['Stroke']):
        for stroke in strokes:
            painter.setPen(create_stroke_pen(stroke.color, stroke.width))
            painter.drawLine(
                QPointF(stroke.p1.x, stroke.p1.y),
                QPointF(stroke.p2.x, stroke.p2.y)
            )

    def _paint_stickers(self, painter: QPainter, stickers: Iterable['Sticker']):
        for sticker in stickers:
            target = QRectF(sticker.x, sticker.y, sticker.width, sticker.height)
            painter.drawImage(target, sticker.image)

            if sticker.selected and Config.SHOW_SELECTION_OUTLINE:
                painter.setPen(create_selection_pen())
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawRect(target)


__all__ = ['Compositor', 'create_stroke_pen', 'create_selection_pen']
