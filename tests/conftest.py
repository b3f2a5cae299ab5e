"""Root conftest - offscreen Qt, documents with controllable image loading."""

import os

# Must be set before any QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtGui import QColor, QImage
from PyQt6.QtWidgets import QApplication

from purikura.core.document import Document
from purikura.services.image_loader import ImageLoader
from purikura.utils.image_utils import decode_image_source


class ManualLoader:
    """Loader double that completes requests only when told to."""

    def __init__(self):
        self.requests = []

    def load(self, source, on_loaded, on_failed=None):
        self.requests.append((source, on_loaded, on_failed))
        return len(self.requests)

    def complete(self, index):
        source, on_loaded, _ = self.requests[index]
        on_loaded(decode_image_source(source))

    def fail(self, index, message="decode failed"):
        _, _, on_failed = self.requests[index]
        on_failed(message)


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def make_image(qapp):
    def _make(width, height, color="#00FF00"):
        image = QImage(width, height, QImage.Format.Format_ARGB32)
        image.fill(QColor(color))
        return image
    return _make


@pytest.fixture
def loader(qapp):
    return ImageLoader(synchronous=True)


@pytest.fixture
def manual_loader():
    return ManualLoader()


@pytest.fixture
def document(loader):
    return Document(800, 600, loader=loader)


@pytest.fixture
def manual_document(qapp, manual_loader):
    return Document(800, 600, loader=manual_loader)
