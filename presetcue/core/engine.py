"""
Positioning engine wiring and startup
"""

import functools
import logging

from presetcue import __version__
from presetcue.core.interfaces import (
    CameraCommandSurface,
    OperatorPrompt,
    PanelBuilder,
    PresetCatalog,
    SelectorControl,
    Telemetry,
)
from presetcue.core.reconciler import SelectionReconciler
from presetcue.core.registry import SubscriptionRegistry
from presetcue.core.sequencer import CommandSequencer
from presetcue.core.settings import FeatureFlags, PanelText, TimingSettings
from presetcue.core.settle import SettleMonitor
from presetcue.core.state import PositioningState
from presetcue.models.selection import TRACKING_FEATURES, Feature

logger = logging.getLogger(__name__)

# Status subscription armed for each tracking capability offered on the panel
TRACKING_SUBSCRIPTIONS = {
    Feature.PRESENTER: "CamerasPresenterTrackStatus",
    Feature.SPEAKER: "CamerasSpeakerTrackStatus",
    Feature.FRAMES: "CamerasSpeakerTrackFramesStatus",
}


class PositioningEngine:
    """Owns the positioning state and connects telemetry to the reconciler"""

    def __init__(
        self,
        telemetry: Telemetry,
        camera: CameraCommandSurface,
        catalog: PresetCatalog,
        control: SelectorControl,
        prompt: OperatorPrompt,
        panel: PanelBuilder,
        features: FeatureFlags | None = None,
        timing: TimingSettings | None = None,
        text: PanelText | None = None,
    ):
        self.features = features if features is not None else FeatureFlags()
        self.timing = timing if timing is not None else TimingSettings()
        self._telemetry = telemetry
        self._panel = panel

        self.state = PositioningState()
        self.settle_monitor = SettleMonitor(telemetry, self.timing)
        self.sequencer = CommandSequencer(
            camera, catalog, self.settle_monitor, self.state, self.features, self.timing
        )
        self.reconciler = SelectionReconciler(
            self.sequencer, self.state, control, prompt, panel, catalog, self.timing, text
        )
        self.registry = SubscriptionRegistry()

    async def start(self) -> None:
        """Build the panel, clear the selector and arm every subscription"""
        logger.info("Initializing PresetCue positioning engine version [%s]...", __version__)
        capabilities = await self._panel.rebuild("Initialization")

        self.state.invalidate()
        await self.reconciler.unset("Initialization")

        self._register_subscriptions(capabilities)
        self.registry.start_all()
        logger.info("Positioning engine initialized")

    def stop(self) -> None:
        self.registry.stop_all()
        self.state.gate.cancel()

    def _register_subscriptions(self, capabilities: frozenset[Feature]) -> None:
        telemetry = self._telemetry
        reconciler = self.reconciler
        register = self.registry.register

        register("WidgetAction", lambda: telemetry.subscribe_widget_action(reconciler.on_widget_action))
        register(
            "CameraPresetActivated",
            lambda: telemetry.subscribe_preset_activated(reconciler.on_preset_activated),
        )
        register(
            "CameraPresetListUpdated",
            lambda: telemetry.subscribe_catalog_changed(reconciler.on_catalog_changed),
        )
        register(
            "CameraPosition", lambda: telemetry.subscribe_position(None, reconciler.on_camera_position)
        )
        register(
            "AllConfigurations",
            lambda: telemetry.subscribe_configuration_changed(reconciler.on_configuration_changed),
        )

        if self.features.on_call_set_default_preset:
            register("CallConnected", lambda: telemetry.subscribe_call_status(reconciler.on_call_status))

        for feature in TRACKING_FEATURES:
            if feature in capabilities:
                register(TRACKING_SUBSCRIPTIONS[feature], self._tracking_status_start(feature))

    def _tracking_status_start(self, feature: Feature):
        handler = functools.partial(self.reconciler.on_tracking_status, feature)
        return lambda: self._telemetry.subscribe_tracking_status(feature, handler)
