"""
Camera settle detection using a failsafe timer and a rolling idle timer
"""

import asyncio
import logging
from enum import Enum

from presetcue.core.interfaces import Telemetry
from presetcue.core.settings import TimingSettings
from presetcue.models.camera import PositionDelta

logger = logging.getLogger(__name__)


class SettleOutcome(Enum):
    TIMED_OUT = "Monitor Timed Out"
    STOPPED = "Camera Stopped"


class SettleMonitor:
    """
    Temporarily subscribes to pan/tilt/zoom telemetry of a camera.

    Resolves on whichever fires first:
    - the failsafe timer, started immediately, so the wait always completes
    - the idle timer, re-armed on every moving tick, once movement has been
      silent for its full duration

    All-zero ticks are not movement and neither start nor reset the idle timer.
    """

    def __init__(self, telemetry: Telemetry, timing: TimingSettings | None = None):
        self._telemetry = telemetry
        self._timing = timing if timing is not None else TimingSettings()

    async def await_settle(self, camera_id: int) -> SettleOutcome:
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future = loop.create_future()
        idle_handle: asyncio.TimerHandle | None = None

        def resolve(result: SettleOutcome) -> None:
            if outcome.done():
                return
            failsafe_handle.cancel()
            if idle_handle is not None:
                idle_handle.cancel()
            outcome.set_result(result)

        def on_position(_camera_id: int, delta: PositionDelta) -> None:
            nonlocal idle_handle
            if outcome.done() or not delta.is_moving:
                return
            if idle_handle is not None:
                idle_handle.cancel()
            idle_handle = loop.call_later(self._timing.settle_idle_s, resolve, SettleOutcome.STOPPED)

        failsafe_handle = loop.call_later(
            self._timing.settle_failsafe_s, resolve, SettleOutcome.TIMED_OUT
        )

        try:
            unsubscribe = self._telemetry.subscribe_position(camera_id, on_position)
        except Exception:
            logger.warning(
                "Unable to monitor camera [%s] position, waiting for failsafe", camera_id, exc_info=True
            )
            unsubscribe = None

        try:
            result = await outcome
        finally:
            failsafe_handle.cancel()
            if idle_handle is not None:
                idle_handle.cancel()
            if unsubscribe is not None:
                unsubscribe()

        logger.debug("Camera position monitoring stopped on [%s]: %s", camera_id, result.value)
        return result
