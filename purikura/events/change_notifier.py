"""
ChangeNotifier - Payload-free change notification for the canvas document

Pattern: Observer/Publisher-Subscriber

Subscribers are zero-argument callables. They are told *that* something
changed, never *what*; they re-read whatever state they need.
"""

import logging
from typing import Callable, List

from PyQt6.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)


class ChangeNotifier(QObject):
    """
    Registry of change callbacks owned by a document.

    Usage:
        notifier = ChangeNotifier()
        notifier.on_change(refresh_toolbar)
        notifier.notify()
        notifier.off_change(refresh_toolbar)

    Qt consumers can connect to the ``changed`` signal instead.
    """

    changed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._callbacks: List[Callable[[], None]] = []

    def on_change(self, callback: Callable[[], None]):
        """
        Subscribe a callback.

        Subscribing the same callback twice creates two independent
        subscriptions; it will be called twice per notification.
        """
        self._callbacks.append(callback)

    def off_change(self, callback: Callable[[], None]):
        """Remove one subscription of callback. Unknown callbacks are ignored."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            pass

    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def notify(self):
        """Fire every subscription, then the Qt signal."""
        # Copy so callbacks may unsubscribe themselves while being notified
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception:
                logger.exception(f"Change callback {callback!r} raised")
        self.changed.emit()


__all__ = ['ChangeNotifier']
