"""Tests for the command sequencer."""

import asyncio

import pytest

from presetcue.core.sequencer import CommandSequencer
from presetcue.core.settings import FeatureFlags
from presetcue.core.settle import SettleMonitor
from presetcue.core.state import PositioningState
from presetcue.exceptions import ActivationFailed, InvalidPresetReference, NoDefaultPreset
from presetcue.models.camera import PositionDelta, PresetRecord
from presetcue.models.selection import Feature, PresetSelection

from conftest import FakeCatalog

DEACTIVATE_ALL = [
    ("tracking", Feature.SPEAKER, False),
    ("tracking", Feature.FRAMES, False),
    ("tracking", Feature.PRESENTER, False),
]


@pytest.fixture
def state():
    return PositioningState()


@pytest.fixture
def make_sequencer(hub, camera, catalog, state, timing, no_settle):
    def make(features=no_settle, catalog=catalog):
        return CommandSequencer(camera, catalog, SettleMonitor(hub, timing), state, features, timing)

    return make


class TestActivatePreset:
    """Test CommandSequencer.activate_preset."""

    @pytest.mark.asyncio
    async def test_command_order(self, make_sequencer, camera):
        await make_sequencer().activate_preset(PresetSelection(2, 5, "Lectern"), "test")

        assert camera.calls == DEACTIVATE_ALL + [("preset", 5), ("main_source", 2)]

    @pytest.mark.asyncio
    async def test_gate_released_after_window(self, make_sequencer, state, timing):
        await make_sequencer().activate_preset(PresetSelection(2, 5), "test")

        assert state.gate.is_active()
        assert state.gate.close_pending

        await asyncio.sleep(timing.preset_gate_close_s + 0.05)

        assert not state.gate.is_active()

    @pytest.mark.asyncio
    async def test_missing_camera_id(self, make_sequencer, camera, state):
        with pytest.raises(InvalidPresetReference):
            await make_sequencer().activate_preset(PresetSelection(None, 5), "test")

        assert camera.commands("preset") == []
        assert camera.commands("main_source") == []
        assert state.gate.close_pending

    @pytest.mark.asyncio
    async def test_missing_preset_id(self, make_sequencer, camera):
        with pytest.raises(InvalidPresetReference):
            await make_sequencer().activate_preset(PresetSelection(2, None), "test")

        assert camera.commands("preset") == []

    @pytest.mark.asyncio
    async def test_deactivation_failures_do_not_abort(self, make_sequencer, camera):
        camera.fail_tracking = True

        await make_sequencer().activate_preset(PresetSelection(1, 0), "test")

        assert camera.calls == [("preset", 0), ("main_source", 1)]

    @pytest.mark.asyncio
    async def test_rejected_recall(self, make_sequencer, camera, state):
        camera.fail_preset = True

        with pytest.raises(ActivationFailed) as excinfo:
            await make_sequencer().activate_preset(PresetSelection(1, 0), "Selector Press")

        assert excinfo.value.cause == "Selector Press"
        assert camera.commands("main_source") == []
        assert state.gate.close_pending

    @pytest.mark.asyncio
    async def test_main_source_waits_for_settle(self, make_sequencer, camera, hub, timing):
        sequencer = make_sequencer(features=FeatureFlags(main_source_set_on_camera_ramp_stop=True))
        activation = asyncio.ensure_future(sequencer.activate_preset(PresetSelection(2, 3), "test"))

        await asyncio.sleep(0.01)
        hub.publish_position(2, PositionDelta(pan=3))
        await asyncio.sleep(0.01)

        assert camera.commands("preset") == [("preset", 3)]
        assert camera.commands("main_source") == []

        await activation

        assert camera.calls[-1] == ("main_source", 2)

    @pytest.mark.asyncio
    async def test_main_source_set_after_failsafe(self, make_sequencer, camera, timing):
        sequencer = make_sequencer(features=FeatureFlags(main_source_set_on_camera_ramp_stop=True))
        loop = asyncio.get_running_loop()
        started = loop.time()

        await sequencer.activate_preset(PresetSelection(2, 3), "test")

        assert loop.time() - started >= timing.settle_failsafe_s * 0.9
        assert camera.calls[-1] == ("main_source", 2)


class TestActivateTrackingMode:
    """Test CommandSequencer.activate_tracking_mode."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "feature, expected",
        [
            (
                Feature.PRESENTER,
                [(Feature.PRESENTER, True), (Feature.SPEAKER, False), (Feature.FRAMES, False)],
            ),
            (
                Feature.SPEAKER,
                [(Feature.PRESENTER, False), (Feature.SPEAKER, True), (Feature.FRAMES, False)],
            ),
            (
                Feature.FRAMES,
                [(Feature.PRESENTER, False), (Feature.SPEAKER, True), (Feature.FRAMES, True)],
            ),
        ],
    )
    async def test_command_triples(self, make_sequencer, camera, feature, expected):
        await make_sequencer().activate_tracking_mode(feature, "test")

        assert camera.calls == [("tracking", target, enabled) for target, enabled in expected]

    @pytest.mark.asyncio
    async def test_manual_is_not_a_tracking_mode(self, make_sequencer, camera, state):
        with pytest.raises(ValueError):
            await make_sequencer().activate_tracking_mode(Feature.MANUAL, "test")

        assert camera.calls == []
        assert not state.gate.is_active()

    @pytest.mark.asyncio
    async def test_rejected_command(self, make_sequencer, camera, state, timing):
        camera.fail_tracking = True

        with pytest.raises(ActivationFailed):
            await make_sequencer().activate_tracking_mode(Feature.SPEAKER, "test")

        assert state.gate.is_active()
        await asyncio.sleep(timing.mode_gate_close_s + 0.05)
        assert not state.gate.is_active()


class TestActivateDefaultPreset:
    """Test CommandSequencer.activate_default_preset."""

    @pytest.mark.asyncio
    async def test_first_default_wins(self, make_sequencer, camera):
        record = await make_sequencer().activate_default_preset("Call [Connected]")

        assert record == PresetRecord(2, 3, "Room", is_default=True)
        assert camera.calls == DEACTIVATE_ALL + [("preset", 3), ("main_source", 2)]

    @pytest.mark.asyncio
    async def test_no_default(self, make_sequencer, camera, state):
        catalog = FakeCatalog([PresetRecord(1, 0, "Wide"), PresetRecord(1, 1, "Tight")])

        with pytest.raises(NoDefaultPreset):
            await make_sequencer(catalog=catalog).activate_default_preset("test")

        assert camera.calls == []
        assert state.gate.close_pending

    @pytest.mark.asyncio
    async def test_catalog_failure(self, make_sequencer, catalog, camera):
        catalog.fail_list = True

        with pytest.raises(ActivationFailed):
            await make_sequencer().activate_default_preset("test")

        assert camera.calls == []
