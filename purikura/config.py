"""
Global configuration for Purikura Canvas

Central place for canvas defaults, brush limits and loader settings.
"""

import os
import sys
from pathlib import Path
from typing import Final


class Config:
    """Central configuration class for all application settings"""

    # Application metadata
    APP_NAME: Final[str] = "Purikura EVO"
    APP_VERSION: Final[str] = "0.3.0"
    APP_AUTHOR: Final[str] = "Purikura"

    # Paths
    APP_ROOT: Final[Path] = Path(__file__).parent
    LOG_FILE_NAME: Final[str] = "purikura.log"

    # Canvas settings
    DEFAULT_CANVAS_WIDTH: Final[int] = 1280
    DEFAULT_CANVAS_HEIGHT: Final[int] = 720
    CANVAS_BACKGROUND: Final[str] = "#FFFFFF"  # Widget fill behind the transparent surface

    # Brush settings
    DEFAULT_COLOR: Final[str] = "#FF5722"
    DEFAULT_BRUSH_SIZE: Final[int] = 5
    MIN_BRUSH_SIZE: Final[int] = 1
    MAX_BRUSH_SIZE: Final[int] = 50

    # Selection outline drawn around the selected sticker
    SHOW_SELECTION_OUTLINE: Final[bool] = True
    SELECTION_OUTLINE_COLOR: Final[str] = "#2196F3"
    SELECTION_OUTLINE_WIDTH: Final[float] = 2.0

    # Image loading
    IMAGE_LOADER_THREAD_COUNT: Final[int] = 2  # Background decode workers

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """
        Get user data directory.

        Uses system AppData/Local (Windows), Application Support (macOS)
        or .local/share (Linux).
        """
        if sys.platform == 'win32':
            base_path = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~')))
            user_dir = base_path / 'PurikuraEVO'
        elif sys.platform == 'darwin':
            user_dir = Path.home() / 'Library' / 'Application Support' / 'PurikuraEVO'
        else:
            user_dir = Path.home() / '.local' / 'share' / 'PurikuraEVO'

        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get the directory log files are written to."""
        return cls.get_user_data_dir() / 'logs'


__all__ = ['Config']
