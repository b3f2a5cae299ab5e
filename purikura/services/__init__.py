"""Background services for Purikura Canvas"""

from .image_loader import ImageLoader

__all__ = ['ImageLoader']
