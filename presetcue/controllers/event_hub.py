"""
In-process publish/subscribe for camera, call and selector events
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from presetcue.core.interfaces import Telemetry, Unsubscribe
from presetcue.models.camera import PositionDelta
from presetcue.models.selection import Feature

logger = logging.getLogger(__name__)

ANY_CAMERA = "*"


class EventHub(Telemetry):
    """
    Event sources for the positioning engine.

    Publish methods must be called on the event loop thread. Coroutine callbacks
    are scheduled as tasks; a callback that raises is logged and does not stop
    delivery to the other subscribers.
    """

    def __init__(self):
        self._subscribers: dict[tuple, list[Callable]] = {}
        self._tasks: set[asyncio.Task] = set()

    def _subscribe(self, topic: tuple, callback: Callable) -> Unsubscribe:
        self._subscribers.setdefault(topic, []).append(callback)
        subscribed = True

        def unsubscribe() -> None:
            nonlocal subscribed
            if not subscribed:
                return
            subscribed = False
            callbacks = self._subscribers.get(topic, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def subscriber_count(self, *topic) -> int:
        return len(self._subscribers.get(topic, []))

    def _publish(self, topic: tuple, *args: Any) -> None:
        for callback in list(self._subscribers.get(topic, [])):
            try:
                result = callback(*args)
            except Exception:
                logger.exception("Subscriber for %s failed", topic)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Event handler failed", exc_info=error)

    async def drain(self) -> None:
        """Wait for every handler task scheduled so far"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()

    # Subscriptions

    def subscribe_position(self, camera_id, callback) -> Unsubscribe:
        return self._subscribe(("position", ANY_CAMERA if camera_id is None else camera_id), callback)

    def subscribe_tracking_status(self, feature: Feature, callback) -> Unsubscribe:
        return self._subscribe(("tracking", feature), callback)

    def subscribe_call_status(self, callback) -> Unsubscribe:
        return self._subscribe(("call",), callback)

    def subscribe_configuration_changed(self, callback) -> Unsubscribe:
        return self._subscribe(("config",), callback)

    def subscribe_preset_activated(self, callback) -> Unsubscribe:
        return self._subscribe(("preset_activated",), callback)

    def subscribe_catalog_changed(self, callback) -> Unsubscribe:
        return self._subscribe(("catalog",), callback)

    def subscribe_widget_action(self, callback) -> Unsubscribe:
        return self._subscribe(("widget",), callback)

    # Publishing

    def publish_position(self, camera_id: int, delta: PositionDelta) -> None:
        self._publish(("position", camera_id), camera_id, delta)
        self._publish(("position", ANY_CAMERA), camera_id, delta)

    def publish_tracking_status(self, feature: Feature, status: str) -> None:
        logger.debug("%s tracking status: %s", feature.value, status)
        self._publish(("tracking", feature), status)

    def publish_call_status(self, status: str) -> None:
        logger.info("Call status: %s", status)
        self._publish(("call",), status)

    def publish_configuration_changed(self) -> None:
        self._publish(("config",))

    def publish_preset_activated(self, preset_id: int, camera_id: int) -> None:
        self._publish(("preset_activated",), preset_id, camera_id)

    def publish_catalog_changed(self) -> None:
        self._publish(("catalog",))

    def publish_widget_action(self, widget_id: str, action_type: str, value: str) -> None:
        logger.debug("Widget action %s on %s: %s", action_type, widget_id, value)
        self._publish(("widget",), widget_id, action_type, value)
