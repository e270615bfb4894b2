"""
Hardware command sequences for presets and tracking modes

Every sequence opens the suppression gate before its first command and schedules
the gate to close on every exit path, so positioning telemetry caused by the
sequence is never read as manual operator movement.
"""

import logging
from collections.abc import Awaitable

from presetcue.core.interfaces import CameraCommandSurface, PresetCatalog
from presetcue.core.settings import FeatureFlags, TimingSettings
from presetcue.core.settle import SettleMonitor
from presetcue.core.state import PositioningState
from presetcue.exceptions import (
    ActivationError,
    ActivationFailed,
    CameraCommandError,
    InvalidPresetReference,
    NoDefaultPreset,
)
from presetcue.models.camera import PresetRecord
from presetcue.models.selection import Feature, PresetSelection

logger = logging.getLogger(__name__)

# Deactivation order before recalling a preset
DEACTIVATION_ORDER = (Feature.SPEAKER, Feature.FRAMES, Feature.PRESENTER)

# (feature, enabled) commands issued in order to engage each tracking mode
TRACKING_COMMANDS = {
    Feature.PRESENTER: (
        (Feature.PRESENTER, True),
        (Feature.SPEAKER, False),
        (Feature.FRAMES, False),
    ),
    Feature.SPEAKER: (
        (Feature.PRESENTER, False),
        (Feature.SPEAKER, True),
        (Feature.FRAMES, False),
    ),
    Feature.FRAMES: (
        (Feature.PRESENTER, False),
        (Feature.SPEAKER, True),
        (Feature.FRAMES, True),
    ),
}


class CommandSequencer:
    """Issues ordered hardware command sequences under the suppression gate"""

    def __init__(
        self,
        camera: CameraCommandSurface,
        catalog: PresetCatalog,
        settle_monitor: SettleMonitor,
        state: PositioningState,
        features: FeatureFlags | None = None,
        timing: TimingSettings | None = None,
    ):
        self._camera = camera
        self._catalog = catalog
        self._settle_monitor = settle_monitor
        self._state = state
        self._features = features if features is not None else FeatureFlags()
        self._timing = timing if timing is not None else TimingSettings()

    async def _best_effort(self, command: Awaitable, reason: str) -> bool:
        """Await a command whose rejection must not abort the sequence"""
        try:
            await command
        except CameraCommandError as e:
            logger.debug("%s: %s", reason, e)
            return False
        return True

    async def _deactivate_tracking(self, cause: str) -> None:
        for feature in DEACTIVATION_ORDER:
            await self._best_effort(
                self._camera.set_tracking_mode(feature, False),
                f"Failed to Deactivate {feature.value}track. Cause: {cause}",
            )

    async def _recall(self, camera_id: int, preset_id: int, cause: str) -> None:
        """Recall a preset, wait for the camera to settle, then take it as main source"""
        try:
            logger.debug("Setting Preset [%s] on camera [%s]. Cause: %s", preset_id, camera_id, cause)
            await self._camera.activate_preset(preset_id)

            if self._features.main_source_set_on_camera_ramp_stop:
                logger.debug("Waiting for Camera Position to Set")
                await self._settle_monitor.await_settle(camera_id)

            logger.debug("Setting MainSource to [%s]", camera_id)
            await self._camera.set_main_video_source(camera_id)
        except ActivationError:
            raise
        except Exception as e:
            raise ActivationFailed(cause, str(e)) from e

    async def activate_preset(self, preset: PresetSelection, cause: str) -> None:
        """
        Activate a camera preset and set the main source to its camera.

        Raises:
            InvalidPresetReference: CameraId or PresetId missing
            ActivationFailed: a hardware command rejected
        """
        self._state.gate.open()
        try:
            await self._deactivate_tracking(cause)

            if preset.camera_id is None or preset.preset_id is None:
                raise InvalidPresetReference(cause, preset.camera_id, preset.preset_id)

            await self._recall(preset.camera_id, preset.preset_id, cause)
            logger.info("Camera Preset Activated: %s. Cause: %s", preset, cause)
        finally:
            self._state.gate.schedule_close(self._timing.preset_gate_close_s)

    async def activate_tracking_mode(self, feature: Feature, cause: str) -> None:
        """
        Engage a tracking mode, disengaging the competing ones.

        Raises:
            ValueError: feature is Manual, which issues no camera commands
            ActivationFailed: a hardware command rejected
        """
        if feature not in TRACKING_COMMANDS:
            raise ValueError(f"{feature.value} is not a tracking mode")

        self._state.gate.open()
        try:
            logger.info("Activating [%s] tracking. Cause: %s", feature.value, cause)
            for target, enabled in TRACKING_COMMANDS[feature]:
                await self._camera.set_tracking_mode(target, enabled)
        except Exception as e:
            raise ActivationFailed(cause, f"{feature.value} tracking: {e}") from e
        finally:
            self._state.gate.schedule_close(self._timing.mode_gate_close_s)

    async def activate_default_preset(self, cause: str) -> PresetRecord:
        """
        Activate the first catalog preset flagged as default.

        Returns:
            The activated preset record

        Raises:
            NoDefaultPreset: no record is flagged default (nothing is sent to hardware)
            ActivationFailed: the catalog or a hardware command failed
        """
        self._state.gate.open()
        try:
            try:
                presets = await self._catalog.list_presets()
            except Exception as e:
                raise ActivationFailed(cause, f"preset list: {e}") from e

            default = next((preset for preset in presets if preset.is_default), None)
            if default is None:
                logger.warning("Unable to find Default Camera Preset. Cause: %s", cause)
                raise NoDefaultPreset(cause)

            logger.debug("Default Camera Preset Found, setting preset position")
            await self._deactivate_tracking(cause)
            await self._recall(default.camera_id, default.preset_id, cause)
            logger.info("Default Camera Preset Activated: %r. Cause: %s", default, cause)
            return default
        finally:
            self._state.gate.schedule_close(self._timing.mode_gate_close_s)
