"""Event system for Purikura Canvas"""

from .change_notifier import ChangeNotifier

__all__ = ['ChangeNotifier']
