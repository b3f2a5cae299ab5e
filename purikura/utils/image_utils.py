"""
Image utilities for decoding image sources and reading pixels back

Sources accepted by the canvas:
- QImage (already decoded; copied)
- bytes (encoded PNG/JPEG/... data)
- str or Path pointing at an image file
- str data URI ("data:image/png;base64,...") as produced by a webcam
  snapshot or a file picker
"""

import base64
import binascii
from pathlib import Path
from typing import Union
from urllib.parse import unquote_to_bytes

import numpy as np
from PyQt6.QtGui import QImage

ImageSource = Union[QImage, bytes, str, Path]

DATA_URI_PREFIX = 'data:'


class ImageDecodeError(Exception):
    """Raised when an image source cannot be decoded into pixels."""


def describe_source(source: ImageSource) -> str:
    """Short human-readable description of a source for log messages."""
    if isinstance(source, QImage):
        return f"QImage({source.width()}x{source.height()})"
    if isinstance(source, bytes):
        return f"bytes({len(source)})"
    text = str(source)
    if text.startswith(DATA_URI_PREFIX):
        return text.split(',', 1)[0] + ',...'
    return text


def decode_data_uri(uri: str) -> bytes:
    """
    Extract the payload of a data URI.

    Args:
        uri: "data:[<mediatype>][;base64],<data>"

    Returns:
        Raw payload bytes

    Raises:
        ImageDecodeError: If the URI is malformed
    """
    if not uri.startswith(DATA_URI_PREFIX) or ',' not in uri:
        raise ImageDecodeError(f"Malformed data URI: {describe_source(uri)}")

    header, payload = uri[len(DATA_URI_PREFIX):].split(',', 1)
    if header.endswith(';base64'):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageDecodeError(f"Invalid base64 payload in data URI: {e}") from e
    return unquote_to_bytes(payload)


def decode_image_source(source: ImageSource) -> QImage:
    """
    Decode an image source into a QImage.

    Safe to call from a worker thread (QImage, not QPixmap).

    Args:
        source: QImage, encoded bytes, file path or data URI

    Returns:
        Non-null QImage owned by the caller

    Raises:
        ImageDecodeError: If the source cannot be read or decoded
    """
    if isinstance(source, QImage):
        image = source.copy()
    elif isinstance(source, bytes):
        image = QImage.fromData(source)
    elif isinstance(source, str) and source.startswith(DATA_URI_PREFIX):
        image = QImage.fromData(decode_data_uri(source))
    elif isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise ImageDecodeError(f"Image file not found: {path}")
        image = QImage(str(path))
    else:
        raise ImageDecodeError(f"Unsupported image source type: {type(source).__name__}")

    if image.isNull() or image.width() <= 0 or image.height() <= 0:
        raise ImageDecodeError(f"Could not decode image: {describe_source(source)}")

    return image


def qimage_to_array(image: QImage) -> np.ndarray:
    """
    Copy a QImage's pixels into an RGBA numpy array.

    Args:
        image: Source QImage in any format

    Returns:
        uint8 array of shape (height, width, 4)
    """
    if image.format() != QImage.Format.Format_RGBA8888:
        image = image.convertToFormat(QImage.Format.Format_RGBA8888)

    width = image.width()
    height = image.height()

    ptr = image.constBits()
    ptr.setsize(image.sizeInBytes())
    rows = np.array(ptr, dtype=np.uint8).reshape((height, image.bytesPerLine()))
    return rows[:, :width * 4].reshape((height, width, 4)).copy()


__all__ = [
    'ImageSource',
    'ImageDecodeError',
    'describe_source',
    'decode_data_uri',
    'decode_image_source',
    'qimage_to_array',
]
