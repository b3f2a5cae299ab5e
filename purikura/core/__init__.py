"""
Canvas core.

- geometry: contain-fit and hit-testing helpers
- document: editable document state
- compositor: full redraw onto the raster surface
- interaction: pointer state machine
"""

from .geometry import InvalidDimension, Point, Rect, compute_contain_fit, rect_contains
from .compositor import Compositor
from .document import (
    BackgroundPlacement,
    Document,
    LoadStatus,
    Mode,
    PendingLoad,
    Sticker,
    Stroke,
)
from .interaction import InteractionController, InteractionState

__all__ = [
    # Geometry
    'InvalidDimension',
    'Point',
    'Rect',
    'compute_contain_fit',
    'rect_contains',
    # Rendering
    'Compositor',
    # Document
    'BackgroundPlacement',
    'Document',
    'LoadStatus',
    'Mode',
    'PendingLoad',
    'Sticker',
    'Stroke',
    # Interaction
    'InteractionController',
    'InteractionState',
]
