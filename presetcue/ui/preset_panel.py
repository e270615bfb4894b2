"""
Camera preset selector panel
"""

import logging

from PyQt6.QtCore import Qt, QTimer, pyqtSignal  # type: ignore
from PyQt6.QtWidgets import (  # type: ignore
    QButtonGroup,
    QLabel,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from presetcue.constants import PanelConstants, UIConstants
from presetcue.core.settings import PanelText
from presetcue.exceptions import ControlSyncFailed
from presetcue.models.panel import PanelLayout
from presetcue.ui_strings import UIStrings

logger = logging.getLogger(__name__)


class PresetPanel(QWidget):
    """
    Group of exclusive buttons, one per selector value.

    Pressing a button only reports the press; the checked button is set by the
    positioning engine through ``set_value`` / ``unset_value``.
    """

    widget_action = pyqtSignal(str, str, str)  # widget_id, action type, value

    def __init__(self, parent=None):
        super().__init__(parent)
        self._buttons: dict[str, QPushButton] = {}
        self._prompt: QMessageBox | None = None

        self.button_group = QButtonGroup(self)
        self.button_group.setExclusive(True)

        self.init_ui()

    def init_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(6)

        self.title_label = QLabel(f"<b>{UIStrings.PANEL_NAME}</b>")
        layout.addWidget(self.title_label)

        self.info_label = QLabel(UIStrings.PAGE_INFOBOX)
        self.info_label.setWordWrap(True)
        self.info_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.info_label)

        self.selector_container = QWidget()
        self.selector_layout = QVBoxLayout(self.selector_container)
        self.selector_layout.setContentsMargins(0, 0, 0, 0)
        self.selector_layout.setSpacing(4)
        layout.addWidget(self.selector_container)

        self.no_presets_label = QLabel(UIStrings.NO_PRESETS_FOUND)
        self.no_presets_label.setWordWrap(True)
        self.no_presets_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.no_presets_label.hide()
        layout.addWidget(self.no_presets_label)

        layout.addStretch()

        self.main_source_label = QLabel(UIStrings.MAIN_SOURCE_NONE)
        layout.addWidget(self.main_source_label)

    def populate(self, panel_layout: PanelLayout, text: PanelText) -> None:
        """Replace every selector button (GUI thread)"""
        self.title_label.setText(f"<b>{text.panel_name}</b>")
        self.info_label.setText(text.infobox)

        for button in self._buttons.values():
            self.button_group.removeButton(button)
            button.deleteLater()
        self._buttons.clear()

        if not panel_layout.has_selector:
            self.selector_container.hide()
            self.no_presets_label.show()
            logger.info("No camera presets to show")
            return

        for value in panel_layout.values:
            button = QPushButton(value.name)
            button.setCheckable(True)
            button.setMinimumWidth(UIConstants.BUTTON_MIN_WIDTH)
            button.released.connect(lambda key=value.key: self._on_released(key))
            self.button_group.addButton(button)
            self.selector_layout.addWidget(button)
            self._buttons[value.key] = button

        self.no_presets_label.hide()
        self.selector_container.show()
        logger.debug("Selector rebuilt with %d values", len(self._buttons))

    def _on_released(self, key: str) -> None:
        self.widget_action.emit(PanelConstants.SELECTOR_WIDGET_ID, PanelConstants.ACTION_RELEASED, key)

    def set_value(self, widget_id: str, key: str) -> None:
        if widget_id != PanelConstants.SELECTOR_WIDGET_ID:
            raise ControlSyncFailed(f"Unknown widget [{widget_id}]")
        button = self._buttons.get(key)
        if button is None:
            raise ControlSyncFailed(f"[{key}] is not a value of [{widget_id}]")
        button.setChecked(True)

    def unset_value(self, widget_id: str) -> None:
        if widget_id != PanelConstants.SELECTOR_WIDGET_ID:
            raise ControlSyncFailed(f"Unknown widget [{widget_id}]")
        # An exclusive group cannot be left with nothing checked
        self.button_group.setExclusive(False)
        for button in self._buttons.values():
            button.setChecked(False)
        self.button_group.setExclusive(True)

    def show_prompt(self, title: str, text: str, dismiss: str, duration_s: int) -> None:
        """Non-modal informational prompt closed after ``duration_s``"""
        if self._prompt is not None:
            self._prompt.close()

        prompt = QMessageBox(self)
        prompt.setIcon(QMessageBox.Icon.Information)
        prompt.setWindowTitle(title)
        prompt.setText(text)
        prompt.addButton(dismiss, QMessageBox.ButtonRole.AcceptRole)
        prompt.setModal(False)
        prompt.show()
        QTimer.singleShot(duration_s * 1000, prompt.close)
        self._prompt = prompt

    def set_main_source(self, camera_id: int) -> None:
        self.main_source_label.setText(UIStrings.MAIN_SOURCE.format(camera_id=camera_id))
