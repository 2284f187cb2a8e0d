"""User-facing notification sinks.

Delivery is fire-and-forget: a sink that is missing or raises never
interrupts the timer.
"""

from collections.abc import Callable
from typing import Protocol

from pomocal.utils.error_handler import safe_with_default
from pomocal.utils.mixins import LoggerMixin


class NotificationSink(Protocol):
    def notify(self, title: str, body: str) -> None: ...


class LogNotificationSink(LoggerMixin):
    """Writes notifications to the application log."""

    def notify(self, title: str, body: str) -> None:
        self.logger.info("Notification", title=title, body=body)


class CallbackNotificationSink:
    """Forwards notifications to a plain callable (UI bridge, tests)."""

    def __init__(self, callback: Callable[[str, str], None]) -> None:
        self._callback = callback

    def notify(self, title: str, body: str) -> None:
        self._callback(title, body)


@safe_with_default("deliver notification", False, level="warning")
def deliver(sink: NotificationSink | None, title: str, body: str) -> bool:
    """Send through ``sink`` if one is configured; returns False when skipped or failed."""
    if sink is None:
        return False
    sink.notify(title, body)
    return True
