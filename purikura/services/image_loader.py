"""
ImageLoader - Async image decoding with QThreadPool

Pattern: Background loading with QRunnable workers

Decoding runs on a worker thread; results come back to the GUI thread
through queued signals and are handed to the callbacks registered
with the request.
"""

import itertools
import logging
import time
from typing import Callable, Dict, Optional, Tuple

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal
from PyQt6.QtGui import QImage

from ..config import Config
from ..utils.image_utils import ImageDecodeError, ImageSource, decode_image_source, describe_source

logger = logging.getLogger(__name__)

LoadedCallback = Callable[[QImage], None]
FailedCallback = Callable[[str], None]


class ImageLoadSignals(QObject):
    """Signals for ImageLoadTask"""

    load_complete = pyqtSignal(int, QImage, float)  # request_id, image, elapsed_ms
    load_failed = pyqtSignal(int, str)  # request_id, error_message


class ImageLoadTask(QRunnable):
    """
    Background task decoding one image source

    Usage:
        task = ImageLoadTask(request_id, source)
        threadpool.start(task)
    """

    def __init__(self, request_id: int, source: ImageSource):
        super().__init__()
        self.request_id = request_id
        self.source = source
        self.signals = ImageLoadSignals()
        self.start_time = time.time()

    def run(self):
        """Execute decode task"""
        try:
            image = decode_image_source(self.source)
        except ImageDecodeError as e:
            self.signals.load_failed.emit(self.request_id, str(e))
            return
        except Exception as e:
            self.signals.load_failed.emit(self.request_id, f"Image load error: {e}")
            return

        elapsed_ms = (time.time() - self.start_time) * 1000
        self.signals.load_complete.emit(self.request_id, image, elapsed_ms)


class ImageLoader(QObject):
    """
    Starts image decodes and routes their results to callbacks

    Callbacks always run on the thread that owns the loader (the GUI
    thread). In synchronous mode the decode happens inline inside
    load(), which is what headless tools and tests use.

    Usage:
        loader = ImageLoader()
        loader.load(path, on_loaded=show_image, on_failed=report)
    """

    def __init__(self, parent=None, synchronous: bool = False):
        super().__init__(parent)
        self._synchronous = synchronous

        self.thread_pool = QThreadPool(self)
        self.thread_pool.setMaxThreadCount(Config.IMAGE_LOADER_THREAD_COUNT)

        self._request_ids = itertools.count(1)
        self._callbacks: Dict[int, Tuple[LoadedCallback, Optional[FailedCallback]]] = {}

    @property
    def synchronous(self) -> bool:
        return self._synchronous

    def pending_count(self) -> int:
        """Number of requests whose callbacks have not run yet."""
        return len(self._callbacks)

    def load(
        self,
        source: ImageSource,
        on_loaded: LoadedCallback,
        on_failed: Optional[FailedCallback] = None
    ) -> int:
        """
        Start decoding source.

        Args:
            source: Image source (see image_utils)
            on_loaded: Called with the decoded QImage
            on_failed: Called with an error message if decoding fails

        Returns:
            Request id
        """
        request_id = next(self._request_ids)
        self._callbacks[request_id] = (on_loaded, on_failed)

        if self._synchronous:
            try:
                image = decode_image_source(source)
            except ImageDecodeError as e:
                self._on_load_failed(request_id, str(e))
            else:
                self._on_load_complete(request_id, image, 0.0)
            return request_id

        task = ImageLoadTask(request_id, source)
        task.signals.load_complete.connect(self._on_load_complete)
        task.signals.load_failed.connect(self._on_load_failed)
        logger.debug(f"Decoding {describe_source(source)} (request {request_id})")
        self.thread_pool.start(task)
        return request_id

    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until all running decodes finish. Results still need the event loop."""
        return self.thread_pool.waitForDone(msecs)

    def _on_load_complete(self, request_id: int, image: QImage, elapsed_ms: float):
        """Handle successful decode"""
        callbacks = self._callbacks.pop(request_id, None)
        if callbacks is None:
            return
        logger.debug(f"Decoded request {request_id} in {elapsed_ms:.1f} ms")
        on_loaded, _ = callbacks
        on_loaded(image)

    def _on_load_failed(self, request_id: int, error_message: str):
        """Handle failed decode"""
        callbacks = self._callbacks.pop(request_id, None)
        if callbacks is None:
            return
        logger.debug(f"Image request {request_id} failed: {error_message}")
        _, on_failed = callbacks
        if on_failed is not None:
            on_failed(error_message)


__all__ = ['ImageLoader', 'ImageLoadTask', 'ImageLoadSignals']
