"""
Collaborator interfaces consumed by the positioning engine

Implementations raise CameraCommandError (or a subclass) when hardware rejects a
command, CatalogError when a preset lookup fails and ControlSyncFailed when the
selector refuses a value.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from presetcue.models.camera import PositionDelta, PresetRecord
from presetcue.models.selection import Feature

Unsubscribe = Callable[[], None]


class PresetCatalog(ABC):
    @abstractmethod
    async def list_presets(self) -> list[PresetRecord]:
        """Return every preset in catalog order"""

    @abstractmethod
    async def show_preset(self, preset_id: int) -> PresetRecord:
        """Return one preset, raising CatalogError when unknown"""


class CameraCommandSurface(ABC):
    @abstractmethod
    async def activate_preset(self, preset_id: int) -> None:
        """Submit a preset recall; returns once the command is sent"""

    @abstractmethod
    async def set_main_video_source(self, camera_id: int) -> None:
        pass

    @abstractmethod
    async def set_tracking_mode(self, feature: Feature, enabled: bool) -> None:
        """Turn a tracking feature on or off (Presenter on means Follow)"""

    @abstractmethod
    async def query_tracking_capabilities(self) -> frozenset[Feature]:
        """Tracking features the hardware reports as available"""


class Telemetry(ABC):
    """
    Event sources. Callbacks may be plain functions or coroutine functions.

    Every subscribe returns an idempotent unsubscribe callable.
    """

    @abstractmethod
    def subscribe_position(
        self, camera_id: int | None, callback: Callable[[int, PositionDelta], Any]
    ) -> Unsubscribe:
        """Movement ticks for one camera, or for every camera when camera_id is None"""

    @abstractmethod
    def subscribe_tracking_status(
        self, feature: Feature, callback: Callable[[str], Any]
    ) -> Unsubscribe:
        pass

    @abstractmethod
    def subscribe_call_status(self, callback: Callable[[str], Any]) -> Unsubscribe:
        pass

    @abstractmethod
    def subscribe_configuration_changed(self, callback: Callable[[], Any]) -> Unsubscribe:
        pass

    @abstractmethod
    def subscribe_preset_activated(self, callback: Callable[[int, int], Any]) -> Unsubscribe:
        """Callback receives (preset_id, camera_id)"""

    @abstractmethod
    def subscribe_catalog_changed(self, callback: Callable[[], Any]) -> Unsubscribe:
        pass

    @abstractmethod
    def subscribe_widget_action(self, callback: Callable[[str, str, str], Any]) -> Unsubscribe:
        """Callback receives (widget_id, action_type, value)"""


class SelectorControl(ABC):
    @abstractmethod
    async def set_value(self, widget_id: str, value: str) -> None:
        """Raise ControlSyncFailed when the value cannot be shown"""

    @abstractmethod
    async def unset_value(self, widget_id: str) -> None:
        pass


class OperatorPrompt(ABC):
    @abstractmethod
    async def display(self, title: str, text: str, dismiss: str, duration_s: int) -> None:
        pass


class PanelBuilder(ABC):
    @abstractmethod
    async def rebuild(self, cause: str) -> frozenset[Feature]:
        """Rebuild the selector panel, returning the tracking features it offers"""
