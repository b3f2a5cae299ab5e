"""Widgets for Purikura Canvas"""

from .canvas_widget import CanvasWidget

__all__ = ['CanvasWidget']
