"""
InteractionController - Turns pointer event sequences into document edits

States:
- IDLE: no button held
- DRAWING: draw mode, accumulating ink one segment per move
- DRAGGING_STICKER: select mode, pointer went down on a sticker
- DRAGGING_BACKGROUND: select mode, pointer went down on the background

The mode is sampled when the pointer goes down. A gesture in progress
finishes under the mode it started in, even if set_mode() is called
before the pointer is released.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from PyQt6.QtGui import QColor

from ..config import Config
from .document import Document, Mode
from .geometry import Point

logger = logging.getLogger(__name__)

PointLike = Union[Point, Sequence[float]]


class InteractionState(Enum):
    """Controller states."""
    IDLE = 0
    DRAWING = 1
    DRAGGING_BACKGROUND = 2
    DRAGGING_STICKER = 3


@dataclass
class DrawSession:
    """Ink gesture in progress; color and width are fixed at pointer down."""
    last_point: Point
    color: str
    width: float


@dataclass
class BackgroundDrag:
    """Background drag in progress; offset is pointer minus background top-left."""
    offset: Point


@dataclass
class StickerDrag:
    """Sticker drag in progress."""
    sticker_id: str
    last_pointer: Point


def as_point(value: PointLike) -> Point:
    """Accept a Point or an (x, y) pair."""
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(float(x), float(y))


class InteractionController:
    """
    Pointer state machine driving a Document.

    Pointer positions are in surface coordinates (relative to the
    surface's own top-left corner).

    Usage:
        controller = InteractionController(document)
        controller.pointer_down((0, 0))
        controller.pointer_move((10, 0))
        controller.pointer_up()
    """

    def __init__(self, document: Document):
        self._document = document
        self._session: Optional[Union[DrawSession, BackgroundDrag, StickerDrag]] = None
        self._color = Config.DEFAULT_COLOR
        self._brush_size = Config.DEFAULT_BRUSH_SIZE

    # ==================== Properties ====================

    @property
    def document(self) -> Document:
        return self._document

    @property
    def session(self) -> Optional[Union[DrawSession, BackgroundDrag, StickerDrag]]:
        return self._session

    @property
    def state(self) -> InteractionState:
        if isinstance(self._session, DrawSession):
            return InteractionState.DRAWING
        if isinstance(self._session, BackgroundDrag):
            return InteractionState.DRAGGING_BACKGROUND
        if isinstance(self._session, StickerDrag):
            return InteractionState.DRAGGING_STICKER
        return InteractionState.IDLE

    @property
    def color(self) -> str:
        return self._color

    @color.setter
    def color(self, value: Union[str, QColor]):
        self._color = value.name() if isinstance(value, QColor) else value

    @property
    def brush_size(self) -> int:
        return self._brush_size

    @brush_size.setter
    def brush_size(self, value: int):
        self._brush_size = max(Config.MIN_BRUSH_SIZE, min(Config.MAX_BRUSH_SIZE, value))

    # ==================== Pointer Events ====================

    def pointer_down(self, position: PointLike) -> InteractionState:
        """Start a gesture at position. Ignored while a gesture is active."""
        if self._session is not None:
            logger.debug(f"Pointer down ignored while {self.state.name}")
            return self.state

        point = as_point(position)
        if self._document.mode is Mode.DRAW:
            self._session = DrawSession(point, self._color, self._brush_size)
        else:
            self._start_select_gesture(point)
        return self.state

    def _start_select_gesture(self, point: Point):
        sticker = self._document.select_sticker_at(point.x, point.y)
        if sticker is not None:
            self._session = StickerDrag(sticker.id, point)
            return

        if self._document.is_background_hit(point):
            self._document.begin_background_drag(point)
            background = self._document.background
            self._session = BackgroundDrag(point - Point(background.x, background.y))

    def pointer_move(self, position: PointLike):
        """Continue the active gesture; ignored when idle."""
        session = self._session
        if session is None:
            return

        point = as_point(position)
        if isinstance(session, DrawSession):
            self._document.append_stroke(
                session.last_point, point, session.color, session.width, mode=Mode.DRAW
            )
            session.last_point = point
        elif isinstance(session, StickerDrag):
            delta = point - session.last_pointer
            self._document.move_selected_sticker(delta.x, delta.y)
            session.last_pointer = point
        elif isinstance(session, BackgroundDrag):
            self._document.drag_background_to(point)

    def pointer_up(self, position: Optional[PointLike] = None):
        """Finish the active gesture. The release position adds no ink."""
        self._end_gesture()

    def pointer_leave(self):
        """Pointer left the surface; treated like a release."""
        self._end_gesture()

    def cancel(self):
        """Drop any gesture in progress (e.g. the surface is being hidden)."""
        self._end_gesture()

    def _end_gesture(self):
        if isinstance(self._session, BackgroundDrag):
            self._document.end_background_drag()
        self._session = None


__all__ = [
    'InteractionController',
    'InteractionState',
    'DrawSession',
    'BackgroundDrag',
    'StickerDrag',
    'as_point',
]
