"""
Document - Editable canvas state

Holds the background placement, the ordered stroke log, the ordered
sticker collection, the sticker selection and the current mode.

Every mutating operation finishes with a commit: the compositor repaints
the surface from the new state, then the change notifier fires. Operations
attempted outside their valid state (drawing in select mode, moving with
nothing selected, dragging without a background) are silent no-ops.
"""

import itertools
import logging
import uuid as uuid_lib
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from PyQt6.QtGui import QColor, QImage

from ..config import Config
from ..events.change_notifier import ChangeNotifier
from ..services.image_loader import ImageLoader
from ..utils.image_utils import ImageSource, describe_source
from .compositor import Compositor
from .geometry import InvalidDimension, Point, Rect, compute_contain_fit, rect_contains

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Pointer interaction modes."""
    DRAW = 'draw'      # Freehand ink
    SELECT = 'select'  # Pick and drag stickers/background


class LoadStatus(Enum):
    """Lifecycle of an asynchronous image load."""
    PENDING = 'pending'
    APPLIED = 'applied'
    DISCARDED = 'discarded'  # Completed after clear_all()
    FAILED = 'failed'


@dataclass(frozen=True)
class Stroke:
    """One straight segment of a freehand path."""
    p1: Point
    p2: Point
    color: str
    width: float


@dataclass
class Sticker:
    """Positioned bitmap overlay."""
    id: str
    image: QImage
    x: float
    y: float
    width: float
    height: float
    selected: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass
class BackgroundPlacement:
    """Background photo and its contain-fit placement."""
    image: Optional[QImage] = None
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0

    @property
    def is_set(self) -> bool:
        return self.image is not None

    @property
    def rect(self) -> Optional[Rect]:
        """Fitted rectangle in canvas space, or None without an image."""
        if self.image is None:
            return None
        return Rect(
            self.x,
            self.y,
            self.image.width() * self.scale,
            self.image.height() * self.scale
        )


@dataclass(eq=False)
class PendingLoad:
    """
    Handle for an image load started by set_background() or add_sticker().

    Attributes:
        load_id: Document-unique id of this load
        kind: 'background' or 'sticker'
        generation: Document generation when the load started
        source: Short description of the source
        status: Current LoadStatus
        error: Failure message when status is FAILED
        sticker_id: Id of the created sticker once a sticker load applies
    """
    load_id: int
    kind: str
    generation: int
    source: str
    status: LoadStatus = LoadStatus.PENDING
    error: Optional[str] = None
    sticker_id: Optional[str] = None

    @property
    def done(self) -> bool:
        return self.status is not LoadStatus.PENDING


FailureCallback = Callable[[PendingLoad], None]


def _check_size(name: str, width: float, height: float):
    if width <= 0 or height <= 0:
        raise InvalidDimension(f"{name} must be positive, got {width}x{height}")


class Document:
    """
    Editable canvas document bound to a raster surface.

    Usage:
        document = Document(800, 600)
        document.on_change(refresh_toolbar)
        document.set_background('photo.png')
        document.append_stroke(Point(0, 0), Point(10, 0), '#FF5722', 5)
    """

    def __init__(
        self,
        width: int = Config.DEFAULT_CANVAS_WIDTH,
        height: int = Config.DEFAULT_CANVAS_HEIGHT,
        loader: Optional[ImageLoader] = None
    ):
        _check_size('Viewport', width, height)

        self._viewport: Tuple[int, int] = (width, height)
        self._compositor = Compositor(width, height)
        self._notifier = ChangeNotifier()
        self._loader = loader if loader is not None else ImageLoader()

        self._mode = Mode.DRAW
        self._strokes: List[Stroke] = []
        self._stickers: List[Sticker] = []
        self._selected_sticker_id: Optional[str] = None
        self._background = BackgroundPlacement()
        self._background_drag_offset: Optional[Point] = None

        # Bumped by clear_all(); loads started before a clear are discarded
        self._generation = 0
        self._load_ids = itertools.count(1)

        self._compositor.repaint(self)

    # ==================== Read Access ====================

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def strokes(self) -> Tuple[Stroke, ...]:
        return tuple(self._strokes)

    @property
    def stickers(self) -> Tuple[Sticker, ...]:
        """Snapshot of the stickers, bottom to top."""
        return tuple(replace(sticker) for sticker in self._stickers)

    @property
    def selected_sticker_id(self) -> Optional[str]:
        return self._selected_sticker_id

    @property
    def selected_sticker(self) -> Optional[Sticker]:
        sticker = self._find_sticker(self._selected_sticker_id)
        return replace(sticker) if sticker else None

    @property
    def background(self) -> BackgroundPlacement:
        return replace(self._background)

    @property
    def viewport_size(self) -> Tuple[int, int]:
        return self._viewport

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_dragging_background(self) -> bool:
        return self._background_drag_offset is not None

    @property
    def compositor(self) -> Compositor:
        return self._compositor

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def loader(self) -> ImageLoader:
        return self._loader

    def get_sticker(self, sticker_id: str) -> Optional[Sticker]:
        sticker = self._find_sticker(sticker_id)
        return replace(sticker) if sticker else None

    # ==================== Change Notification ====================

    def on_change(self, callback: Callable[[], None]):
        """Subscribe to payload-free change notifications."""
        self._notifier.on_change(callback)

    def off_change(self, callback: Callable[[], None]):
        """Unsubscribe; unknown callbacks are ignored."""
        self._notifier.off_change(callback)

    def _commit(self, repaint: bool = True):
        if repaint:
            self._compositor.repaint(self)
        self._notifier.notify()

    # ==================== Mode & Viewport ====================

    def set_mode(self, mode: Union[Mode, str]):
        """
        Set the interaction mode.

        Args:
            mode: Mode member or its value ('draw' / 'select')

        Raises:
            ValueError: For unknown mode values
        """
        self._mode = Mode(mode)
        self._commit(repaint=False)

    def set_viewport_size(self, width: int, height: int):
        """
        Resize the raster surface.

        The current background keeps its placement; call set_background()
        again to refit it to the new viewport.
        """
        _check_size('Viewport', width, height)
        if (width, height) == self._viewport:
            return
        self._viewport = (width, height)
        self._compositor.resize(width, height)
        self._commit()

    # ==================== Strokes ====================

    def append_stroke(
        self,
        p1: Point,
        p2: Point,
        color: Union[str, QColor],
        width: float,
        *,
        mode: Optional[Mode] = None
    ):
        """
        Append one ink segment.

        Args:
            p1: Segment start
            p2: Segment end
            color: Color name or QColor
            width: Line width in pixels (must be positive)
            mode: Mode the segment is drawn under; defaults to the current
                mode. Only DRAW appends.
        """
        effective_mode = self._mode if mode is None else Mode(mode)
        if effective_mode is not Mode.DRAW:
            logger.debug("Stroke ignored outside draw mode")
            return
        if width <= 0:
            logger.debug(f"Stroke ignored, non-positive width {width}")
            return

        if isinstance(color, QColor):
            color = color.name()
        self._strokes.append(Stroke(p1, p2, color, float(width)))
        self._commit()

    def clear_strokes_only(self):
        """Remove all ink, keeping background, stickers and selection."""
        self._strokes.clear()
        self._commit()

    # ==================== Background ====================

    def set_background(
        self,
        source: ImageSource,
        on_failed: Optional[FailureCallback] = None
    ) -> PendingLoad:
        """
        Replace the background photo once source has been decoded.

        The image is contain-fitted into the viewport size current at
        completion time. Until then the old background stays in place.

        Args:
            source: QImage, encoded bytes, file path or data URI
            on_failed: Called with the PendingLoad if decoding fails

        Returns:
            PendingLoad handle
        """
        pending = self._start_pending('background', source)
        self._loader.load(
            source,
            on_loaded=lambda image: self._apply_background(pending, image),
            on_failed=lambda message: self._fail_load(pending, message, on_failed)
        )
        return pending

    def _apply_background(self, pending: PendingLoad, image: QImage):
        if self._is_stale(pending):
            return

        viewport_width, viewport_height = self._viewport
        scale, x, y = compute_contain_fit(
            viewport_width, viewport_height, image.width(), image.height()
        )
        self._background = BackgroundPlacement(image=image, x=x, y=y, scale=scale)
        self._background_drag_offset = None
        pending.status = LoadStatus.APPLIED
        logger.debug(f"Background applied: {image.width()}x{image.height()} at scale {scale:.3f}")
        self._commit()

    def is_background_hit(self, point: Point) -> bool:
        """True if point lies inside the fitted background rectangle."""
        return rect_contains(self._background.rect, point)

    def begin_background_drag(self, point: Point):
        """Grab the background at point; the grabbed pixel follows the pointer."""
        if not self._background.is_set:
            logger.debug("Background drag ignored, no background set")
            return
        self._background_drag_offset = point - Point(self._background.x, self._background.y)

    def drag_background_to(self, point: Point):
        """Move the background so the grabbed pixel sits under point."""
        if self._background_drag_offset is None or not self._background.is_set:
            return
        top_left = point - self._background_drag_offset
        self._background.x = top_left.x
        self._background.y = top_left.y
        self._commit()

    def end_background_drag(self):
        self._background_drag_offset = None

    # ==================== Stickers ====================

    def add_sticker(
        self,
        source: ImageSource,
        x: float,
        y: float,
        width: Optional[float] = None,
        height: Optional[float] = None,
        on_failed: Optional[FailureCallback] = None
    ) -> PendingLoad:
        """
        Add a sticker on top of the others once source has been decoded.

        Args:
            source: QImage, encoded bytes, file path or data URI
            x: Left edge in canvas space
            y: Top edge in canvas space
            width: Display width (defaults to the image's natural width)
            height: Display height (defaults to the image's natural height)
            on_failed: Called with the PendingLoad if decoding fails

        Returns:
            PendingLoad handle; its sticker_id is set once applied

        Raises:
            InvalidDimension: If an explicit width or height is not positive
        """
        if (width is not None and width <= 0) or (height is not None and height <= 0):
            raise InvalidDimension(f"Sticker size must be positive, got {width}x{height}")

        pending = self._start_pending('sticker', source)
        self._loader.load(
            source,
            on_loaded=lambda image: self._apply_sticker(pending, image, x, y, width, height),
            on_failed=lambda message: self._fail_load(pending, message, on_failed)
        )
        return pending

    def _apply_sticker(
        self,
        pending: PendingLoad,
        image: QImage,
        x: float,
        y: float,
        width: Optional[float],
        height: Optional[float]
    ):
        if self._is_stale(pending):
            return

        sticker = Sticker(
            id=f"sticker_{uuid_lib.uuid4().hex}",
            image=image,
            x=x,
            y=y,
            width=float(width) if width is not None else float(image.width()),
            height=float(height) if height is not None else float(image.height()),
        )
        self._stickers.append(sticker)
        pending.sticker_id = sticker.id
        pending.status = LoadStatus.APPLIED
        logger.debug(f"Sticker {sticker.id} added at ({x}, {y})")
        self._commit()

    def select_sticker_at(self, x: float, y: float) -> Optional[Sticker]:
        """
        Select the topmost sticker containing (x, y).

        A miss clears the selection. This is the only way selection changes.

        Returns:
            Snapshot of the selected sticker, or None
        """
        point = Point(x, y)
        hit = next(
            (sticker for sticker in reversed(self._stickers) if sticker.rect.contains(point)),
            None
        )

        for sticker in self._stickers:
            sticker.selected = sticker is hit
        self._selected_sticker_id = hit.id if hit else None
        self._commit()

        return replace(hit) if hit else None

    def move_selected_sticker(self, dx: float, dy: float):
        """Offset the selected sticker. Not clamped to the canvas."""
        sticker = self._find_sticker(self._selected_sticker_id)
        if sticker is None:
            logger.debug("Move ignored, no sticker selected")
            return
        sticker.x += dx
        sticker.y += dy
        self._commit()

    def remove_sticker(self, sticker_id: str) -> bool:
        """
        Remove a sticker by id.

        Returns:
            True if a sticker was removed
        """
        sticker = self._find_sticker(sticker_id)
        if sticker is None:
            return False
        self._stickers.remove(sticker)
        if self._selected_sticker_id == sticker_id:
            self._selected_sticker_id = None
        self._commit()
        return True

    def _find_sticker(self, sticker_id: Optional[str]) -> Optional[Sticker]:
        if sticker_id is None:
            return None
        return next((s for s in self._stickers if s.id == sticker_id), None)

    # ==================== Clearing ====================

    def clear_all(self):
        """Remove strokes, stickers, selection and background in one step."""
        self._strokes.clear()
        self._stickers.clear()
        self._selected_sticker_id = None
        self._background = BackgroundPlacement()
        self._background_drag_offset = None
        self._generation += 1
        self._commit()

    # ==================== Load Bookkeeping ====================

    def _start_pending(self, kind: str, source: ImageSource) -> PendingLoad:
        return PendingLoad(
            load_id=next(self._load_ids),
            kind=kind,
            generation=self._generation,
            source=describe_source(source)
        )

    def _is_stale(self, pending: PendingLoad) -> bool:
        if pending.generation == self._generation:
            return False
        pending.status = LoadStatus.DISCARDED
        logger.debug(f"Discarding {pending.kind} load {pending.load_id} started before clear")
        return True

    def _fail_load(
        self,
        pending: PendingLoad,
        message: str,
        on_failed: Optional[FailureCallback]
    ):
        pending.status = LoadStatus.FAILED
        pending.error = message
        logger.warning(f"{pending.kind.capitalize()} load failed for {pending.source}: {message}")
        if on_failed is not None:
            on_failed(pending)


__all__ = [
    'Mode',
    'LoadStatus',
    'Stroke',
    'Sticker',
    'BackgroundPlacement',
    'PendingLoad',
    'Document',
]
