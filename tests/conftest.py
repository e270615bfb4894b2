"""Shared fixtures and collaborator fakes for the positioning engine tests."""

import pytest

from presetcue.controllers.event_hub import EventHub
from presetcue.core.interfaces import (
    CameraCommandSurface,
    OperatorPrompt,
    PanelBuilder,
    PresetCatalog,
    SelectorControl,
)
from presetcue.core.settings import FeatureFlags, TimingSettings
from presetcue.exceptions import CatalogError, ControlSyncFailed, ViscaCommandError
from presetcue.models.camera import PresetRecord
from presetcue.models.selection import TRACKING_FEATURES


class FakeCamera(CameraCommandSurface):
    """Records every command; ``fail_tracking`` / ``fail_preset`` make commands reject."""

    def __init__(self, capabilities=frozenset(TRACKING_FEATURES)):
        self.calls = []
        self.capabilities = capabilities
        self.fail_tracking = False
        self.fail_preset = False

    async def activate_preset(self, preset_id):
        if self.fail_preset:
            raise ViscaCommandError(f"preset {preset_id} rejected")
        self.calls.append(("preset", preset_id))

    async def set_main_video_source(self, camera_id):
        self.calls.append(("main_source", camera_id))

    async def set_tracking_mode(self, feature, enabled):
        if self.fail_tracking:
            raise ViscaCommandError(f"{feature.value} rejected")
        self.calls.append(("tracking", feature, enabled))

    async def query_tracking_capabilities(self):
        return self.capabilities

    def commands(self, kind):
        return [call for call in self.calls if call[0] == kind]


class FakeCatalog(PresetCatalog):
    def __init__(self, presets=None):
        self.presets = list(presets or [])
        self.fail_list = False

    async def list_presets(self):
        if self.fail_list:
            raise CatalogError("catalog unavailable")
        return list(self.presets)

    async def show_preset(self, preset_id):
        for preset in self.presets:
            if preset.preset_id == preset_id:
                return preset
        raise CatalogError(f"Preset [{preset_id}] not found")


class FakeControl(SelectorControl):
    """Selector that refuses values listed in ``rejected``."""

    def __init__(self):
        self.calls = []
        self.value = None
        self.rejected = set()
        self.fail_unset = False

    async def set_value(self, widget_id, value):
        if value in self.rejected:
            raise ControlSyncFailed(f"{value} refused")
        self.calls.append(("set", widget_id, value))
        self.value = value

    async def unset_value(self, widget_id):
        if self.fail_unset:
            raise ControlSyncFailed("unset refused")
        self.calls.append(("unset", widget_id))
        self.value = None


class FakePrompt(OperatorPrompt):
    def __init__(self):
        self.displayed = []

    async def display(self, title, text, dismiss, duration_s):
        self.displayed.append((title, text, dismiss, duration_s))


class FakePanel(PanelBuilder):
    def __init__(self, capabilities=frozenset()):
        self.causes = []
        self.capabilities = capabilities

    async def rebuild(self, cause):
        self.causes.append(cause)
        return self.capabilities


@pytest.fixture
def timing():
    """Short timers so settle and gate windows elapse quickly."""
    return TimingSettings(
        settle_failsafe_ms=200,
        settle_idle_ms=40,
        preset_gate_margin_ms=50,
        mode_gate_margin_ms=20,
    )


@pytest.fixture
def no_settle():
    return FeatureFlags(main_source_set_on_camera_ramp_stop=False)


@pytest.fixture
def hub():
    return EventHub()


@pytest.fixture
def camera():
    return FakeCamera()


@pytest.fixture
def presets():
    return [
        PresetRecord(1, 0, "Wide"),
        PresetRecord(2, 3, "Room", is_default=True),
        PresetRecord(2, 5, "Lectern", is_default=True),
    ]


@pytest.fixture
def catalog(presets):
    return FakeCatalog(presets)


@pytest.fixture
def control():
    return FakeControl()


@pytest.fixture
def prompt():
    return FakePrompt()


@pytest.fixture
def panel():
    return FakePanel()
