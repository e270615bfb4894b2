"""
Main application window
"""

import concurrent.futures
import logging

from PyQt6.QtGui import QAction  # type: ignore
from PyQt6.QtWidgets import QApplication, QMainWindow, QMessageBox  # type: ignore

from presetcue.constants import UIConstants
from presetcue.controllers.event_hub import EventHub
from presetcue.controllers.pollers import ConfigFilePoller, PositionPoller, TrackingStatusPoller
from presetcue.controllers.visca_camera import ConfigPresetCatalog, ViscaCameraPool, ViscaCameraSurface
from presetcue.core.engine import PositioningEngine
from presetcue.exceptions import ConfigSaveError
from presetcue.models.config_manager import ConfigManager
from presetcue.ui.async_bridge import AsyncBridge
from presetcue.ui.preset_panel import PresetPanel
from presetcue.ui.qt_adapters import QtOperatorPrompt, QtPanelBuilder, QtSelectorControl
from presetcue.ui_strings import UIStrings

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT_S = 3.0


class MainWindow(QMainWindow):
    """Main application window"""

    def __init__(self, config: ConfigManager, bridge: AsyncBridge):
        super().__init__()

        self.config = config
        self.bridge = bridge

        self.panel = PresetPanel()
        self.hub = EventHub()
        self.pool = ViscaCameraPool(config)
        self.camera = ViscaCameraSurface(self.pool)
        self.catalog = ConfigPresetCatalog(config)

        # Timing and feature switches are read once; a config change only rebuilds the panel
        timing = config.get_timing()
        self.engine = PositioningEngine(
            telemetry=self.hub,
            camera=self.camera,
            catalog=self.catalog,
            control=QtSelectorControl(bridge, self.panel),
            prompt=QtOperatorPrompt(bridge, self.panel),
            panel=QtPanelBuilder(self.catalog, self.camera, config, bridge, self.panel),
            features=config.get_feature_flags(),
            timing=timing,
            text=config.get_panel_text(),
        )
        self.pollers = [
            PositionPoller(self.pool, self.hub, timing.position_poll_ms),
            TrackingStatusPoller(self.pool, self.hub, timing.tracking_poll_ms),
            ConfigFilePoller(config, self.pool, self.hub, timing.config_poll_ms),
        ]

        self.panel.widget_action.connect(self.on_widget_action)
        self.camera.add_main_source_listener(
            lambda camera_id: self.bridge.call_in_gui(self.panel.set_main_source, camera_id)
        )
        # Out-of-band recalls run on the loop, so the hub can be published to directly
        self.camera.add_preset_listener(self.hub.publish_preset_activated)

        self.init_ui()

    def init_ui(self) -> None:
        """Initialize user interface"""
        self.setWindowTitle(UIStrings.APP_NAME)
        self.setGeometry(
            UIConstants.WINDOW_DEFAULT_X,
            UIConstants.WINDOW_DEFAULT_Y,
            UIConstants.WINDOW_DEFAULT_WIDTH,
            UIConstants.WINDOW_DEFAULT_HEIGHT,
        )
        logger.info("Initializing main window UI")

        self.create_menu_bar()
        self.setCentralWidget(self.panel)

    def create_menu_bar(self):
        """Create application menu bar"""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu(UIStrings.MENU_FILE)

        rebuild_action = QAction(UIStrings.MENU_RELOAD_PANEL, self)
        rebuild_action.setShortcut("F5")
        rebuild_action.triggered.connect(self.on_rebuild_panel)
        file_menu.addAction(rebuild_action)

        file_logging_action = QAction(UIStrings.MENU_FILE_LOGGING, self)
        file_logging_action.setCheckable(True)
        file_logging_action.setChecked(self.config.get_file_logging_enabled())
        file_logging_action.triggered.connect(self.on_file_logging_toggled)
        file_menu.addAction(file_logging_action)

        file_menu.addSeparator()
        exit_action = QAction(UIStrings.MENU_EXIT, self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # Call menu
        call_menu = menubar.addMenu(UIStrings.MENU_CALL)

        self.call_connected_action = QAction(UIStrings.MENU_CALL_CONNECTED, self)
        self.call_connected_action.setCheckable(True)
        self.call_connected_action.toggled.connect(self.on_call_toggled)
        call_menu.addAction(self.call_connected_action)

        # Presets menu, recalls outside of the selector
        self.presets_menu = menubar.addMenu(UIStrings.MENU_PRESETS)
        self.presets_menu.aboutToShow.connect(self.populate_presets_menu)

    def populate_presets_menu(self) -> None:
        """List the catalog each time the menu opens"""
        self.presets_menu.clear()
        presets = self.config.get_presets()
        if not presets:
            empty_action = QAction(UIStrings.MENU_NO_PRESETS, self)
            empty_action.setEnabled(False)
            self.presets_menu.addAction(empty_action)
            return

        for preset in presets:
            action = QAction(
                UIStrings.MENU_RECALL_PRESET.format(name=preset["name"], preset_id=preset["preset_id"]),
                self,
            )
            action.triggered.connect(
                lambda checked=False, preset_id=preset["preset_id"]: self.on_recall_preset(preset_id)
            )
            self.presets_menu.addAction(action)

    def start_engine(self) -> concurrent.futures.Future:
        """Start the engine and the pollers on the asyncio loop"""
        future = self.bridge.run_coroutine(self._start())
        future.add_done_callback(self._on_start_done)
        return future

    async def _start(self) -> None:
        await self.engine.start()
        for poller in self.pollers:
            poller.start()

    def _on_start_done(self, future: concurrent.futures.Future) -> None:
        # Runs on the loop thread
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            return
        logger.critical("Positioning engine failed to start", exc_info=error)
        self.bridge.call_in_gui(self._show_startup_error, str(error))

    def _show_startup_error(self, message: str) -> None:
        QMessageBox.critical(self, UIStrings.ERROR_STARTUP, f"{UIStrings.ERROR_STARTUP_MSG}\n\n{message}")
        QApplication.quit()

    def on_widget_action(self, widget_id: str, action_type: str, value: str) -> None:
        self.bridge.call_soon(self.hub.publish_widget_action, widget_id, action_type, value)

    def on_call_toggled(self, checked: bool) -> None:
        status = "Connected" if checked else "Idle"
        logger.info("Call status set to [%s]", status)
        self.bridge.call_soon(self.hub.publish_call_status, status)

    def on_recall_preset(self, preset_id: int) -> None:
        logger.info("Recalling preset [%s] from the Presets menu", preset_id)
        future = self.bridge.run_coroutine(self.camera.recall_preset(preset_id))
        future.add_done_callback(self._on_recall_done)

    def _on_recall_done(self, future: concurrent.futures.Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Preset recall failed: %s", error)

    def on_rebuild_panel(self) -> None:
        self.bridge.call_soon(self.hub.publish_configuration_changed)

    def on_file_logging_toggled(self, checked: bool) -> None:
        """Handle file logging preference toggle"""
        try:
            self.config.config["preferences"]["file_logging_enabled"] = checked
            self.config.save()
        except ConfigSaveError:
            logger.exception("Error toggling file logging preference")
            return

        # Inform user that restart is required
        message = UIStrings.LOGGING_ENABLED_MSG if checked else UIStrings.LOGGING_DISABLED_MSG
        QMessageBox.information(self, UIStrings.DIALOG_RESTART_REQUIRED, message)
        logger.info(f"File logging preference set to {checked} (restart required)")

    async def _shutdown(self) -> None:
        for poller in self.pollers:
            await poller.stop()
        self.engine.stop()
        self.hub.cancel_pending()

    def closeEvent(self, event) -> None:
        """Handle window close event"""
        logger.info("Closing application and stopping the positioning engine...")

        if self.bridge.loop is not None:
            try:
                self.bridge.run_coroutine(self._shutdown()).result(SHUTDOWN_TIMEOUT_S)
            except concurrent.futures.TimeoutError:
                logger.warning("Positioning engine did not stop within %.1fs", SHUTDOWN_TIMEOUT_S)
            except Exception:
                logger.exception("Error stopping positioning engine")
            self.bridge.stop()

        self.pool.reset()
        logger.info("Cleanup complete, exiting...")
        event.accept()
