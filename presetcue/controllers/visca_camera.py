"""
Camera command surface and preset catalog backed by VISCA cameras and the config file
"""

import asyncio
import logging
from collections.abc import Callable

from presetcue.controllers.visca_ip import ViscaIP
from presetcue.core.interfaces import CameraCommandSurface, PresetCatalog
from presetcue.exceptions import CatalogError, ViscaCommandError, ViscaConnectionError
from presetcue.models.camera import PresetRecord
from presetcue.models.config_manager import ConfigManager
from presetcue.models.selection import TRACKING_FEATURES, Feature

logger = logging.getLogger(__name__)


class ViscaCameraPool:
    """One ViscaIP controller per configured camera, created on first use"""

    def __init__(self, config: ConfigManager):
        self.config = config
        self._controllers: dict[int, ViscaIP] = {}

    def camera_ids(self) -> list[int]:
        return [camera["camera_id"] for camera in self.config.get_cameras()]

    def get(self, camera_id: int) -> ViscaIP:
        controller = self._controllers.get(camera_id)
        if controller is None:
            camera = self.config.get_camera(camera_id)
            if camera is None:
                raise ViscaConnectionError(f"Camera [{camera_id}] is not configured")
            controller = ViscaIP(camera["visca_ip"], camera["visca_port"])
            self._controllers[camera_id] = controller
        return controller

    def reset(self) -> None:
        """Close every socket; controllers are recreated from the current config"""
        for controller in self._controllers.values():
            controller.close()
        self._controllers.clear()


class ViscaCameraSurface(CameraCommandSurface):
    """
    Camera commands over VISCA-over-IP.

    Presets are recalled on the camera the catalog assigns them to. Tracking
    features are driven by the raw VISCA commands configured for them. The main
    video source is application state reported to main source listeners.

    Recalls made with ``recall_preset`` bypass the selector and are reported to
    preset listeners as external activations.
    """

    def __init__(self, pool: ViscaCameraPool):
        self._pool = pool
        self.main_source: int | None = None
        self._main_source_listeners: list[Callable[[int], None]] = []
        self._preset_listeners: list[Callable[[int, int], None]] = []

    def add_main_source_listener(self, listener: Callable[[int], None]) -> None:
        self._main_source_listeners.append(listener)

    def add_preset_listener(self, listener: Callable[[int, int], None]) -> None:
        """listener(preset_id, camera_id) runs after each out-of-band recall"""
        self._preset_listeners.append(listener)

    async def _send(self, camera_id: int, command: str) -> None:
        controller = self._pool.get(camera_id)
        sent = await asyncio.to_thread(controller.send_command, command)
        if not sent:
            raise ViscaCommandError(f"Camera [{camera_id}] rejected [{command}]: {controller.last_error}")

    async def activate_preset(self, preset_id: int) -> None:
        preset = self._pool.config.get_preset(preset_id)
        if preset is None:
            raise ViscaCommandError(f"Preset [{preset_id}] is not in the catalog")

        controller = self._pool.get(preset["camera_id"])
        recalled = await asyncio.to_thread(controller.recall_preset_position, preset_id)
        if not recalled:
            raise ViscaCommandError(f"Preset [{preset_id}] recall failed: {controller.last_error}")

    async def recall_preset(self, preset_id: int) -> None:
        """Recall a preset outside of the selector and report it"""
        preset = self._pool.config.get_preset(preset_id)
        await self.activate_preset(preset_id)
        camera_id = preset["camera_id"]
        logger.info("Preset [%s] recalled on camera [%s] from outside the selector", preset_id, camera_id)
        for listener in self._preset_listeners:
            listener(preset_id, camera_id)

    async def set_main_video_source(self, camera_id: int) -> None:
        if self._pool.config.get_camera(camera_id) is None:
            raise ViscaConnectionError(f"Camera [{camera_id}] is not configured")

        self.main_source = camera_id
        logger.info("Main video source set to camera [%s]", camera_id)
        for listener in self._main_source_listeners:
            listener(camera_id)

    async def set_tracking_mode(self, feature: Feature, enabled: bool) -> None:
        tracking = self._pool.config.get_tracking_config(feature)
        if tracking is None:
            raise ViscaCommandError(f"{feature.value} tracking is not available")
        await self._send(tracking["camera_id"], tracking["on"] if enabled else tracking["off"])

    async def query_tracking_capabilities(self) -> frozenset[Feature]:
        return frozenset(
            feature
            for feature in TRACKING_FEATURES
            if self._pool.config.get_tracking_config(feature) is not None
        )


class ConfigPresetCatalog(PresetCatalog):
    """Preset catalog read from the configuration file"""

    def __init__(self, config: ConfigManager):
        self._config = config

    async def list_presets(self) -> list[PresetRecord]:
        return [PresetRecord.from_dict(preset) for preset in self._config.get_presets()]

    async def show_preset(self, preset_id: int) -> PresetRecord:
        preset = self._config.get_preset(preset_id)
        if preset is None:
            raise CatalogError(f"Preset [{preset_id}] not found")
        return PresetRecord.from_dict(preset)
