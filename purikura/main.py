"""
Purikura Canvas - Main Entry Point

Usage:
    python -m purikura.main [background_image] [sticker_image ...]
"""

import sys

from PyQt6.QtWidgets import QApplication

from .config import Config
from .core.document import PendingLoad
from .utils.logging_config import LoggingConfig


def setup_application() -> QApplication:
    """
    Initialize and configure the Qt application

    Returns:
        Configured QApplication instance
    """
    app = QApplication(sys.argv)
    app.setApplicationName(Config.APP_NAME)
    app.setApplicationVersion(Config.APP_VERSION)
    app.setOrganizationName(Config.APP_AUTHOR)
    return app


def main():
    """
    Main entry point for Purikura Canvas

    Creates the application, shows the canvas, loads any images given
    on the command line and runs the event loop.
    """
    LoggingConfig.setup_logging(Config.get_log_dir())

    logger = LoggingConfig.get_logger(__name__)
    logger.info(f"Starting {Config.APP_NAME} {Config.APP_VERSION}...")

    app = setup_application()

    from .widgets.canvas_widget import CanvasWidget
    window = CanvasWidget()
    window.setWindowTitle(Config.APP_NAME)
    window.show()

    def on_failed(pending: PendingLoad):
        logger.error(f"Could not load {pending.source}: {pending.error}")

    args = app.arguments()[1:]
    if args:
        window.document.set_background(args[0], on_failed=on_failed)
    for offset, sticker_path in enumerate(args[1:]):
        position = 40 + offset * 24
        window.document.add_sticker(sticker_path, position, position, on_failed=on_failed)

    logger.info("Application started successfully!")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
