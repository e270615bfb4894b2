"""Tests for the Qt selector adapter (no QApplication, the bridge is replaced)."""

import pytest

from presetcue.constants import PanelConstants
from presetcue.core.reconciler import SelectionReconciler
from presetcue.core.sequencer import CommandSequencer
from presetcue.core.settings import PanelText
from presetcue.core.settle import SettleMonitor
from presetcue.core.state import PositioningState
from presetcue.exceptions import ControlSyncFailed
from presetcue.models.camera import PositionDelta

qt_adapters = pytest.importorskip("presetcue.ui.qt_adapters", reason="PyQt6 is not importable")

WIDGET = PanelConstants.SELECTOR_WIDGET_ID


class DirectBridge:
    """Runs GUI calls inline"""

    async def gui(self, func, *args):
        return func(*args)


class DeletedWidgetPanel:
    """Behaves like a panel whose Qt widgets were already destroyed"""

    def __init__(self):
        self.unset_calls = []

    def set_value(self, widget_id, value):
        raise RuntimeError("wrapped C/C++ object of type QPushButton has been deleted")

    def unset_value(self, widget_id):
        self.unset_calls.append(widget_id)


class TestQtSelectorControl:
    """Test QtSelectorControl error mapping."""

    @pytest.mark.asyncio
    async def test_widget_error_becomes_sync_failure(self):
        control = qt_adapters.QtSelectorControl(DirectBridge(), DeletedWidgetPanel())

        with pytest.raises(ControlSyncFailed) as excinfo:
            await control.set_value(WIDGET, "Type:Automatic~Feature:Manual")

        assert isinstance(excinfo.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_sync_failure_passes_through(self):
        class RefusingPanel(DeletedWidgetPanel):
            def unset_value(self, widget_id):
                raise ControlSyncFailed("no such widget")

        control = qt_adapters.QtSelectorControl(DirectBridge(), RefusingPanel())

        with pytest.raises(ControlSyncFailed, match="no such widget"):
            await control.unset_value(WIDGET)

    @pytest.mark.asyncio
    async def test_reconciler_unsets_after_widget_error(
        self, hub, camera, catalog, prompt, panel, timing, no_settle
    ):
        widgets = DeletedWidgetPanel()
        control = qt_adapters.QtSelectorControl(DirectBridge(), widgets)
        state = PositioningState()
        sequencer = CommandSequencer(camera, catalog, SettleMonitor(hub, timing), state, no_settle, timing)
        reconciler = SelectionReconciler(
            sequencer, state, control, prompt, panel, catalog, timing, PanelText(), widget_id=WIDGET
        )

        await reconciler.on_camera_position(1, PositionDelta(pan=3))

        assert widgets.unset_calls == [WIDGET]
