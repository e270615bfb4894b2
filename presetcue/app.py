"""
PresetCue - Camera preset and tracking mode selector kept in sync with VISCA-over-IP cameras
"""

import logging
import sys
import traceback

import qdarkstyle
from PyQt6.QtCore import Qt  # type: ignore
from PyQt6.QtWidgets import QApplication, QMessageBox  # type: ignore

from presetcue import __version__
from presetcue.exceptions import ConfigLoadError, PresetCueError
from presetcue.models.config_manager import ConfigManager
from presetcue.ui.async_bridge import AsyncBridge
from presetcue.ui.main_window import MainWindow
from presetcue.ui_strings import UIStrings
from presetcue.utils import get_app_data_dir


def setup_logging(file_logging_enabled: bool = False) -> None:
    """Configure application logging

    Args:
        file_logging_enabled: If True, logs to file in addition to console
    """
    log_dir = get_app_data_dir() / "logs"
    log_dir.mkdir(exist_ok=True)
    log_file = log_dir / "presetcue.log"

    # Build handlers list based on preference
    handlers = [logging.StreamHandler(sys.stdout)]
    if file_logging_enabled:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    # Configure root logger
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Pollers run several times a second
    logging.getLogger("presetcue.controllers.pollers").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info(f"PresetCue {__version__} starting")
    if file_logging_enabled:
        logger.info(f"Log file: {log_file}")
    else:
        logger.info("File logging disabled (console only)")
    logger.info("=" * 60)


def exception_hook(exc_type, exc_value, exc_traceback):
    """Global exception handler to prevent app crashes"""
    # Don't catch KeyboardInterrupt - let it exit normally
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logger = logging.getLogger(__name__)
    logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback))

    error_msg = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))

    error_title = UIStrings.ERROR_CRITICAL
    if issubclass(exc_type, PresetCueError):
        error_title = f"{type(exc_value).__name__}"

    try:
        msg_box = QMessageBox()
        msg_box.setIcon(QMessageBox.Icon.Critical)
        msg_box.setWindowTitle(error_title)
        msg_box.setText(UIStrings.ERROR_GENERIC)
        msg_box.setDetailedText(error_msg)
        msg_box.setStandardButtons(QMessageBox.StandardButton.Ok)
        msg_box.exec()
    except Exception:
        # If even the error dialog fails, just log it
        logger.exception("Failed to show error dialog")


class ExceptionHandlingApplication(QApplication):
    """QApplication subclass that catches Qt event exceptions"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.logger = logging.getLogger(__name__)

    def notify(self, receiver, event) -> bool:
        """Override notify to catch exceptions in Qt event handlers"""
        try:
            return super().notify(receiver, event)
        except KeyboardInterrupt:
            raise
        except Exception as e:
            error_msg = f"Exception in Qt event handler: {str(e)}"
            self.logger.exception(error_msg)

            try:
                msg_box = QMessageBox()
                msg_box.setIcon(QMessageBox.Icon.Critical)
                msg_box.setWindowTitle(UIStrings.ERROR_QT_EVENT)
                msg_box.setText(UIStrings.ERROR_QT_EVENT_MSG)
                msg_box.setDetailedText(f"{error_msg}\n\n{traceback.format_exc()}")
                msg_box.setStandardButtons(QMessageBox.StandardButton.Ok)
                msg_box.exec()
            except Exception:
                self.logger.exception("Failed to show Qt event error dialog")

            # Event not handled
            return False


def main() -> int:
    """Main application entry point"""
    # Load config first to get logging preference
    try:
        config = ConfigManager()
    except ConfigLoadError as e:
        setup_logging()
        logging.getLogger(__name__).critical(f"Cannot load configuration: {e}")
        return 1

    setup_logging(config.get_file_logging_enabled())
    logger = logging.getLogger(__name__)
    logger.info("Starting PresetCue application")

    # Install global exception handler
    sys.excepthook = exception_hook

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = ExceptionHandlingApplication(sys.argv)
    app.setApplicationName(UIStrings.APP_NAME)
    app.setOrganizationName(UIStrings.APP_NAME)

    if config.get_theme() == "dark":
        app.setStyleSheet(qdarkstyle.load_stylesheet(qt_api="pyqt6"))

    bridge = AsyncBridge()
    bridge.start()

    try:
        window = MainWindow(config, bridge)
        window.show()
        window.start_engine()
    except Exception as e:
        error_msg = f"Failed to initialize application:\n{str(e)}\n\n{traceback.format_exc()}"
        logger.critical("Startup error", exc_info=True)
        QMessageBox.critical(None, UIStrings.ERROR_STARTUP, error_msg)
        bridge.stop()
        return 1

    logger.info("Starting Qt event loop")
    return app.exec()
