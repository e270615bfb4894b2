"""
Starts event subscriptions exactly once
"""

import logging
from collections.abc import Callable

from presetcue.core.interfaces import Unsubscribe

logger = logging.getLogger(__name__)

SubscriptionStart = Callable[[], Unsubscribe | None]


class SubscriptionRegistry:
    """
    Named subscription starts, armed once in sorted name order.

    After ``start_all`` each entry is replaced by a no-op that warns when invoked,
    so calling ``start_all`` again never subscribes twice. A start that raises
    aborts startup.
    """

    def __init__(self):
        self._registrations: dict[str, SubscriptionStart] = {}
        self._started: set[str] = set()
        self._unsubscribers: list[Callable[[], None]] = []

    def register(self, name: str, start: SubscriptionStart) -> None:
        if name in self._started:
            logger.warning("The [%s] subscription is already active, not registering it again", name)
            return
        self._registrations[name] = start

    def names(self) -> list[str]:
        return sorted(self._registrations)

    def is_started(self, name: str) -> bool:
        return name in self._started

    def start_all(self) -> list[str]:
        """Start every pending registration; returns the names armed by this call"""
        names = sorted(self._registrations)
        armed = []
        for name in names:
            unsubscribe = self._registrations[name]()
            if name in self._started:
                continue
            if callable(unsubscribe):
                self._unsubscribers.append(unsubscribe)
            self._started.add(name)
            armed.append(name)
            self._registrations[name] = self._already_active(name)

        logger.info(
            "Subscriptions Set: Total_Subs=%d, Active_Subs=%s", len(names), ", ".join(armed)
        )
        return armed

    def stop_all(self) -> None:
        """Unsubscribe everything started so far"""
        while self._unsubscribers:
            self._unsubscribers.pop()()
        logger.info("Subscriptions stopped")

    @staticmethod
    def _already_active(name: str) -> SubscriptionStart:
        def warn() -> None:
            logger.warning("The [%s] subscription is already active, unable to fire it again", name)

        return warn
