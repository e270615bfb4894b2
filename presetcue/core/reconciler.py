"""
Reconciles selector presses and hardware telemetry into the displayed selection
"""

import logging

from presetcue.constants import PanelConstants
from presetcue.core.interfaces import OperatorPrompt, PanelBuilder, PresetCatalog, SelectorControl
from presetcue.core.sequencer import CommandSequencer
from presetcue.core.settings import PanelText, TimingSettings
from presetcue.core.state import PositioningState
from presetcue.exceptions import (
    ActivationError,
    CatalogError,
    ControlSyncFailed,
    MalformedSelection,
    NoDefaultPreset,
)
from presetcue.models.camera import PositionDelta, is_engaged
from presetcue.models.selection import (
    MANUAL,
    Feature,
    PresetSelection,
    Selection,
    TrackingSelection,
    decode_selection,
    encode_selection,
)

logger = logging.getLogger(__name__)

# Call states on which the default preset is activated
CALL_STATES_FOR_DEFAULT = ("Connected", "Connecting")


class SelectionReconciler:
    """
    Maps inbound events to the selection the selector should display.

    A value the selector refuses is never left stale: the selector is unset
    instead.
    """

    def __init__(
        self,
        sequencer: CommandSequencer,
        state: PositioningState,
        control: SelectorControl,
        prompt: OperatorPrompt,
        panel: PanelBuilder,
        catalog: PresetCatalog,
        timing: TimingSettings | None = None,
        text: PanelText | None = None,
        widget_id: str = PanelConstants.SELECTOR_WIDGET_ID,
    ):
        self._sequencer = sequencer
        self._state = state
        self._control = control
        self._prompt = prompt
        self._panel = panel
        self._catalog = catalog
        self._timing = timing if timing is not None else TimingSettings()
        self._text = text if text is not None else PanelText()
        self.widget_id = widget_id

    async def unset(self, cause: str) -> None:
        try:
            await self._control.unset_value(self.widget_id)
        except ControlSyncFailed as e:
            logger.warning("Failed to Unset Widget Value. Cause: %s (%s)", cause, e)

    async def push(self, selection: Selection, cause: str) -> bool:
        """Show ``selection`` on the selector, unsetting it if that fails"""
        try:
            await self._control.set_value(self.widget_id, encode_selection(selection))
        except (ControlSyncFailed, MalformedSelection) as e:
            logger.debug("Failed to Set Widget Value. Cause: %s (%s)", cause, e)
            await self.unset(cause)
            return False
        return True

    async def on_widget_action(self, widget_id: str, action_type: str, value: str) -> None:
        if action_type != PanelConstants.ACTION_RELEASED or widget_id != self.widget_id:
            return

        try:
            selection = decode_selection(value)
        except MalformedSelection as e:
            logger.warning("Dropping selector value: %s", e)
            return

        if isinstance(selection, PresetSelection):
            self._state.remember_selection(selection)
            try:
                await self._sequencer.activate_preset(selection, "Selector Press")
            except ActivationError as e:
                logger.error("Failed to activate preset %s: %s", selection, e)
                await self.unset("Selector Press > Preset")
        elif selection.is_manual:
            await self._select_manual()
        else:
            self._state.remember_selection(selection)
            try:
                await self._sequencer.activate_tracking_mode(selection.feature, "Selector Press")
            except ActivationError as e:
                logger.error("Failed to activate [%s] tracking: %s", selection.feature.value, e)
                await self.unset(f"Selector Press > {selection.feature.value}")

    async def _select_manual(self) -> None:
        """Prompt the operator and put the selector back on the remembered selection"""
        gate = self._state.gate
        gate.open()
        try:
            text = self._text
            await self._prompt.display(
                text.manual_prompt_title,
                text.manual_prompt_text,
                text.manual_prompt_dismiss,
                text.manual_prompt_duration_s,
            )
            logger.info("Manual Selection detected, prompting user on Manual Control")

            previous = self._state.last_selection
            if isinstance(previous, PresetSelection) or (
                isinstance(previous, TrackingSelection) and not previous.is_manual
            ):
                await self.push(previous, "Selector Press > Manual")
            else:
                await self.unset("Selector Press > Manual")
        finally:
            gate.schedule_close(self._timing.mode_gate_close_s)

    async def on_preset_activated(self, preset_id: int, camera_id: int) -> None:
        """A preset was activated outside of this selector"""
        gate = self._state.gate
        gate.open()
        try:
            try:
                name = (await self._catalog.show_preset(preset_id)).name
            except CatalogError as e:
                logger.debug("Preset [%s] lookup failed: %s", preset_id, e)
                name = ""
            selection = PresetSelection(camera_id, preset_id, name)
            self._state.remember_selection(selection)
            await self.push(selection, "External Preset Selection")
        finally:
            gate.schedule_close(self._timing.preset_gate_close_s)

    async def on_tracking_status(self, feature: Feature, status: str) -> None:
        """Only transitions into the engaged state are shown"""
        if not is_engaged(feature, status):
            return

        gate = self._state.gate
        gate.open()
        try:
            selection = TrackingSelection(feature)
            self._state.remember_selection(selection)
            await self.push(selection, f"{feature.value}track Status")
        finally:
            gate.schedule_close(self._timing.preset_gate_close_s)

    async def on_camera_position(self, camera_id: int, delta: PositionDelta) -> None:
        """Movement outside of a suppression window is manual operator movement"""
        if self._state.gate.is_active() or not delta.is_moving:
            return

        logger.debug("Manual movement on camera [%s]: %s", camera_id, delta)
        self._state.remember_selection(MANUAL)
        await self.push(MANUAL, "Camera Position change")

    async def on_catalog_changed(self) -> None:
        await self._panel.rebuild("Camera Preset List Updated")

    async def on_configuration_changed(self) -> None:
        await self._panel.rebuild("Config Change Detected")

    async def on_call_status(self, status: str) -> None:
        if status not in CALL_STATES_FOR_DEFAULT:
            return

        try:
            await self._sequencer.activate_default_preset(f"Call [{status}]")
        except NoDefaultPreset as e:
            logger.debug("No default preset to activate on call: %s", e)
        except ActivationError as e:
            logger.error("Failed to activate default preset: %s", e)
