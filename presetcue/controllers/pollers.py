"""
Periodic VISCA inquiries and config file checks turned into hub events
"""

import asyncio
import logging

from presetcue.controllers.event_hub import EventHub
from presetcue.controllers.visca_camera import ViscaCameraPool
from presetcue.exceptions import ConfigLoadError, ViscaException
from presetcue.models.camera import ENGAGED_STATUS
from presetcue.models.config_manager import ConfigManager
from presetcue.models.selection import TRACKING_FEATURES, Feature

logger = logging.getLogger(__name__)


class PeriodicPoller:
    """Runs ``poll`` every ``interval_ms`` as an asyncio task until stopped"""

    name = "poller"

    def __init__(self, interval_ms: int):
        self.interval_ms = interval_ms
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        logger.debug("%s started (%d ms)", self.name, self.interval_ms)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug("%s stopped", self.name)

    async def _run(self) -> None:
        while True:
            try:
                await self.poll()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("%s poll failed", self.name)
            await asyncio.sleep(self.interval_ms / 1000)

    async def poll(self) -> None:
        raise NotImplementedError


class PositionPoller(PeriodicPoller):
    """Publishes pan/tilt/zoom changes of every configured camera"""

    name = "PositionPoller"

    def __init__(self, pool: ViscaCameraPool, hub: EventHub, interval_ms: int):
        super().__init__(interval_ms)
        self._pool = pool
        self._hub = hub
        self._last_positions: dict[int, tuple[int, int, int]] = {}

    async def poll(self) -> None:
        for camera_id in self._pool.camera_ids():
            try:
                controller = self._pool.get(camera_id)
                position = await asyncio.to_thread(controller.query_position)
            except ViscaException as e:
                logger.debug("Position inquiry failed for camera [%s]: %s", camera_id, e)
                position = None

            if position is None:
                # No baseline: the next good reading must not count as movement
                self._last_positions.pop(camera_id, None)
                continue

            previous = self._last_positions.get(camera_id)
            self._last_positions[camera_id] = position
            if previous is None:
                continue

            delta = controller.position_delta(previous, position)
            if delta.is_moving:
                self._hub.publish_position(camera_id, delta)


# Status reported when a polled feature is not engaged
DISENGAGED_STATUS = {
    Feature.PRESENTER: "off",
    Feature.SPEAKER: "inactive",
    Feature.FRAMES: "inactive",
}


class TrackingStatusPoller(PeriodicPoller):
    """
    Publishes tracking status changes for features configured with an inquiry.

    A feature is engaged when the reply hex contains its ``engaged_reply``.
    """

    name = "TrackingStatusPoller"

    def __init__(self, pool: ViscaCameraPool, hub: EventHub, interval_ms: int):
        super().__init__(interval_ms)
        self._pool = pool
        self._hub = hub
        self._last_status: dict[Feature, str] = {}

    async def poll(self) -> None:
        for feature in TRACKING_FEATURES:
            tracking = self._pool.config.get_tracking_config(feature)
            if tracking is None or not tracking.get("inquiry") or not tracking.get("engaged_reply"):
                continue

            try:
                controller = self._pool.get(tracking["camera_id"])
                response = await asyncio.to_thread(controller.query_command, tracking["inquiry"])
            except ViscaException as e:
                logger.debug("%s tracking inquiry failed: %s", feature.value, e)
                continue
            if response is None:
                continue

            engaged_reply = tracking["engaged_reply"].replace(" ", "").upper()
            engaged = engaged_reply in response.hex().upper()
            status = ENGAGED_STATUS[feature] if engaged else DISENGAGED_STATUS[feature]
            if self._last_status.get(feature) != status:
                self._last_status[feature] = status
                self._hub.publish_tracking_status(feature, status)


class ConfigFilePoller(PeriodicPoller):
    """Reloads the configuration file when it is modified on disk"""

    name = "ConfigFilePoller"

    def __init__(self, config: ConfigManager, pool: ViscaCameraPool, hub: EventHub, interval_ms: int):
        super().__init__(interval_ms)
        self._config = config
        self._pool = pool
        self._hub = hub
        self._last_mtime = self._mtime()

    def _mtime(self) -> float | None:
        try:
            return self._config.config_path.stat().st_mtime
        except OSError:
            return None

    async def poll(self) -> None:
        mtime = self._mtime()
        if mtime is None or mtime == self._last_mtime:
            return
        self._last_mtime = mtime

        previous_presets = self._config.get_presets()
        previous_cameras = self._config.get_cameras()
        try:
            changed = self._config.reload()
        except ConfigLoadError as e:
            logger.warning("Ignoring configuration change: %s", e)
            return
        if not changed:
            return

        logger.info("Configuration file changed: %s", self._config.config_path)
        if self._config.get_cameras() != previous_cameras:
            self._pool.reset()
        if self._config.get_presets() != previous_presets:
            self._hub.publish_catalog_changed()
        else:
            self._hub.publish_configuration_changed()
