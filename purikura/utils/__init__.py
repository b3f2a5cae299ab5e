"""Utility functions for Purikura Canvas"""

from .image_utils import (
    ImageDecodeError,
    decode_data_uri,
    decode_image_source,
    qimage_to_array,
)
from .logging_config import LoggingConfig

__all__ = [
    'ImageDecodeError',
    'decode_data_uri',
    'decode_image_source',
    'qimage_to_array',
    'LoggingConfig',
]
