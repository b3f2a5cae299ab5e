"""Image sources and the async loader.

Tests:
    - QImage, bytes, file paths and data URIs all decode
    - Undecodable sources raise ImageDecodeError
    - Threaded loads deliver results on the GUI thread via the event loop
"""

import base64

import pytest
from PyQt6.QtCore import QBuffer, QByteArray, QIODevice, QCoreApplication

from purikura.core.document import Document, LoadStatus
from purikura.services.image_loader import ImageLoader
from purikura.utils.image_utils import (
    ImageDecodeError, decode_data_uri, decode_image_source, describe_source, qimage_to_array,
)


def encode_png(image) -> bytes:
    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buffer, "PNG")
    buffer.close()
    return data.data()


def wait_for_loads(loader):
    loader.wait_for_done()
    # Queued completion signals are delivered by the event loop
    for _ in range(10):
        QCoreApplication.processEvents()
        if loader.pending_count() == 0:
            break


# ==================== Decoding ====================

def test_decode_qimage_copies(make_image):
    source = make_image(5, 7)
    image = decode_image_source(source)
    assert (image.width(), image.height()) == (5, 7)
    assert image is not source


def test_decode_png_bytes(make_image):
    image = decode_image_source(encode_png(make_image(12, 9, "#FF0000")))
    assert (image.width(), image.height()) == (12, 9)
    assert tuple(qimage_to_array(image)[4, 4]) == (255, 0, 0, 255)


def test_decode_file_path(tmp_path, make_image):
    path = tmp_path / "sticker.png"
    make_image(20, 10).save(str(path))
    assert decode_image_source(path).width() == 20
    assert decode_image_source(str(path)).height() == 10


def test_decode_base64_data_uri(make_image):
    payload = base64.b64encode(encode_png(make_image(6, 6))).decode("ascii")
    image = decode_image_source(f"data:image/png;base64,{payload}")
    assert (image.width(), image.height()) == (6, 6)


def test_decode_data_uri_percent_encoded():
    assert decode_data_uri("data:text/plain,hi%20there") == b"hi there"


@pytest.mark.parametrize("uri", [
    "data:image/png;base64",
    "data:image/png;base64,***",
])
def test_malformed_data_uri_raises(uri):
    with pytest.raises(ImageDecodeError):
        decode_data_uri(uri)


@pytest.mark.parametrize("source", [
    b"definitely not a png",
    "data:image/png;base64,aGVsbG8=",
    12345,
])
def test_undecodable_sources_raise(qapp, source):
    with pytest.raises(ImageDecodeError):
        decode_image_source(source)


def test_missing_file_raises(tmp_path):
    with pytest.raises(ImageDecodeError):
        decode_image_source(tmp_path / "missing.png")


def test_describe_source_truncates_data_uri():
    assert describe_source("data:image/png;base64,AAAA") == "data:image/png;base64,..."
    assert describe_source(b"abc") == "bytes(3)"


def test_qimage_to_array_shape(make_image):
    pixels = qimage_to_array(make_image(7, 3, "#0000FF"))
    assert pixels.shape == (3, 7, 4)
    assert tuple(pixels[2, 6]) == (0, 0, 255, 255)


# ==================== Loader ====================

def test_synchronous_loader_completes_inline(make_image):
    loader = ImageLoader(synchronous=True)
    loaded = []
    loader.load(make_image(3, 3), on_loaded=loaded.append)
    assert len(loaded) == 1
    assert loader.pending_count() == 0


def test_synchronous_loader_reports_failure():
    loader = ImageLoader(synchronous=True)
    errors = []
    loader.load(b"junk", on_loaded=lambda image: None, on_failed=errors.append)
    assert len(errors) == 1


def test_threaded_loader_delivers_on_event_loop(make_image):
    loader = ImageLoader()
    loaded = []
    loader.load(encode_png(make_image(8, 4)), on_loaded=loaded.append)

    wait_for_loads(loader)

    assert len(loaded) == 1
    assert loaded[0].width() == 8


def test_threaded_loader_reports_failure():
    loader = ImageLoader()
    errors = []
    loader.load(b"junk", on_loaded=lambda image: None, on_failed=errors.append)

    wait_for_loads(loader)

    assert len(errors) == 1


def test_document_with_threaded_loader(qapp, make_image):
    document = Document(800, 600)
    pending = document.set_background(encode_png(make_image(400, 400)))
    assert pending.status is LoadStatus.PENDING

    wait_for_loads(document.loader)

    assert pending.status is LoadStatus.APPLIED
    assert document.background.scale == 1.5
