"""
Suppression gate and remembered selection shared by the sequencer and reconciler
"""

import asyncio
import logging

from presetcue.models.selection import UNKNOWN, Selection

logger = logging.getLogger(__name__)


class SuppressionGate:
    """
    Marks a window during which movement and mode telemetry is self-inflicted.

    Only one window is open at a time. ``open`` cancels any pending close timer
    and ``schedule_close`` replaces one instead of stacking.
    """

    def __init__(self):
        self._active = False
        self._close_handle: asyncio.TimerHandle | None = None

    def open(self) -> None:
        self._cancel_close_timer()
        self._active = True

    def schedule_close(self, after: float) -> None:
        """Clear the gate ``after`` seconds from now (requires a running loop)"""
        self._cancel_close_timer()
        loop = asyncio.get_running_loop()
        self._close_handle = loop.call_later(after, self._close)

    def is_active(self) -> bool:
        return self._active

    @property
    def close_pending(self) -> bool:
        return self._close_handle is not None

    def cancel(self) -> None:
        """Drop any pending close timer and clear the gate immediately"""
        self._cancel_close_timer()
        self._active = False

    def _close(self) -> None:
        self._close_handle = None
        self._active = False
        logger.debug("Positioning suppression released")

    def _cancel_close_timer(self) -> None:
        if self._close_handle is not None:
            self._close_handle.cancel()
            self._close_handle = None


class PositioningState:
    """Owned state of the engine: the suppression gate plus the last selection"""

    def __init__(self, gate: SuppressionGate | None = None):
        self.gate = gate if gate is not None else SuppressionGate()
        self._last_selection: Selection = UNKNOWN

    def remember_selection(self, selection: Selection) -> None:
        self._last_selection = selection

    @property
    def last_selection(self) -> Selection:
        return self._last_selection

    def invalidate(self) -> None:
        """Forget the remembered selection (startup, panel rebuilds)"""
        self._last_selection = UNKNOWN
