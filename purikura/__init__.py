"""
Purikura Canvas

Interactive photo-booth canvas: a background photo, freehand ink and
draggable stickers composited onto a raster surface with PyQt6.
"""

__version__ = "0.3.0"
__author__ = "Purikura"

from .config import Config
from .core.document import Document, Mode
from .core.interaction import InteractionController
from .events.change_notifier import ChangeNotifier

__all__ = [
    'Config',
    'Document',
    'Mode',
    'InteractionController',
    'ChangeNotifier',
]
