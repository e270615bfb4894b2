"""Tests for positioning engine startup and event wiring."""

import pytest

from presetcue.constants import PanelConstants
from presetcue.core.engine import PositioningEngine
from presetcue.core.settings import FeatureFlags
from presetcue.models.camera import PositionDelta
from presetcue.models.selection import MANUAL, UNKNOWN, Feature, encode_selection

BASE_SUBSCRIPTIONS = [
    "AllConfigurations",
    "CallConnected",
    "CameraPosition",
    "CameraPresetActivated",
    "CameraPresetListUpdated",
    "WidgetAction",
]


@pytest.fixture
def make_engine(hub, camera, catalog, control, prompt, panel, timing):
    def make(capabilities=frozenset(), features=None):
        features = features or FeatureFlags(main_source_set_on_camera_ramp_stop=False)
        panel.capabilities = capabilities
        return PositioningEngine(hub, camera, catalog, control, prompt, panel, features, timing)

    return make


class TestStartup:
    """Test PositioningEngine.start."""

    @pytest.mark.asyncio
    async def test_builds_panel_and_unsets_selector(self, make_engine, panel, control):
        engine = make_engine()

        await engine.start()

        assert panel.causes == ["Initialization"]
        assert control.calls == [("unset", PanelConstants.SELECTOR_WIDGET_ID)]
        assert engine.state.last_selection is UNKNOWN

    @pytest.mark.asyncio
    async def test_base_subscriptions(self, make_engine):
        engine = make_engine()

        await engine.start()

        assert engine.registry.names() == BASE_SUBSCRIPTIONS
        assert all(engine.registry.is_started(name) for name in BASE_SUBSCRIPTIONS)

    @pytest.mark.asyncio
    async def test_tracking_subscriptions_follow_capabilities(self, make_engine, hub):
        engine = make_engine(capabilities=frozenset({Feature.SPEAKER}))

        await engine.start()

        assert "CamerasSpeakerTrackStatus" in engine.registry.names()
        assert "CamerasPresenterTrackStatus" not in engine.registry.names()
        assert hub.subscriber_count("tracking", Feature.SPEAKER) == 1
        assert hub.subscriber_count("tracking", Feature.PRESENTER) == 0

    @pytest.mark.asyncio
    async def test_call_subscription_disabled(self, make_engine, hub):
        engine = make_engine(features=FeatureFlags(on_call_set_default_preset=False))

        await engine.start()

        assert "CallConnected" not in engine.registry.names()
        assert hub.subscriber_count("call") == 0

    @pytest.mark.asyncio
    async def test_stop_unsubscribes(self, make_engine, hub):
        engine = make_engine(capabilities=frozenset({Feature.PRESENTER}))
        await engine.start()

        engine.stop()

        assert hub.subscriber_count("widget") == 0
        assert hub.subscriber_count("position", "*") == 0
        assert hub.subscriber_count("tracking", Feature.PRESENTER) == 0


class TestWiring:
    """Events published on the hub reach the reconciler."""

    @pytest.mark.asyncio
    async def test_selector_press(self, make_engine, hub, camera):
        engine = make_engine()
        await engine.start()

        hub.publish_widget_action(
            PanelConstants.SELECTOR_WIDGET_ID,
            PanelConstants.ACTION_RELEASED,
            "Type:Preset~CameraId:1~PresetId:0~PresetName:Wide",
        )
        await hub.drain()

        assert camera.calls[-2:] == [("preset", 0), ("main_source", 1)]

    @pytest.mark.asyncio
    async def test_own_movement_is_not_manual(self, make_engine, hub, control):
        engine = make_engine()
        await engine.start()

        hub.publish_widget_action(
            PanelConstants.SELECTOR_WIDGET_ID,
            PanelConstants.ACTION_RELEASED,
            "Type:Preset~CameraId:1~PresetId:0~PresetName:Wide",
        )
        await hub.drain()
        hub.publish_position(1, PositionDelta(pan=12))
        await hub.drain()

        assert engine.state.last_selection != MANUAL
        assert ("set", PanelConstants.SELECTOR_WIDGET_ID, encode_selection(MANUAL)) not in control.calls
        engine.stop()

    @pytest.mark.asyncio
    async def test_operator_movement_is_manual(self, make_engine, hub, control):
        engine = make_engine()
        await engine.start()

        hub.publish_position(2, PositionDelta(tilt=-3))
        await hub.drain()

        assert engine.state.last_selection == MANUAL
        assert control.value == encode_selection(MANUAL)

    @pytest.mark.asyncio
    async def test_call_connected_recalls_default(self, make_engine, hub, camera):
        engine = make_engine()
        await engine.start()

        hub.publish_call_status("Connected")
        await hub.drain()

        assert ("preset", 3) in camera.calls

    @pytest.mark.asyncio
    async def test_catalog_change_rebuilds_panel(self, make_engine, hub, panel):
        engine = make_engine()
        await engine.start()

        hub.publish_catalog_changed()
        await hub.drain()

        assert panel.causes == ["Initialization", "Camera Preset List Updated"]
