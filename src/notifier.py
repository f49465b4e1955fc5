"""Transient, stacked status messages.

Lifecycle of each notification: appended as ENTERING, promoted to SHOWN on
the next frame, switched to LEAVING after ``duration_ms`` and removed once
the exit transition (``transition_ms``) has run. Every notification owns
its own timers.
"""
from __future__ import annotations
import itertools
import logging
from dataclasses import dataclass
from typing import List, Union

from events import EventLoop
from models import Severity
from surface import NotificationContainer

logger = logging.getLogger(__name__)

NOTIFICATION_DURATION_MS = 3000
TRANSITION_MS = 300

ENTERING = 'entering'
SHOWN = 'shown'
LEAVING = 'leaving'


@dataclass
class Notification:
    message: str
    severity: Severity
    phase: str = ENTERING
    id: int = 0


class Notifier:
    def __init__(self, loop: EventLoop, container: NotificationContainer,
                 duration_ms: float = NOTIFICATION_DURATION_MS, transition_ms: float = TRANSITION_MS):
        self.loop = loop
        self.container = container
        self.duration_ms = duration_ms
        self.transition_ms = transition_ms
        self._ids = itertools.count(1)

    def notify(self, message: str, severity: Union[Severity, str] = Severity.INFO) -> Notification:
        notification = Notification(message=message, severity=Severity(severity), id=next(self._ids))
        self.container.items.append(notification)
        logger.debug("notify[%s] %s", notification.severity.value, message)
        self.loop.request_frame(self._show, notification)
        self.loop.call_later(self.duration_ms, self._dismiss, notification)
        return notification

    def _show(self, notification: Notification) -> None:
        if notification.phase == ENTERING:
            notification.phase = SHOWN

    def _dismiss(self, notification: Notification) -> None:
        notification.phase = LEAVING
        self.loop.call_later(self.transition_ms, self._remove, notification)

    def _remove(self, notification: Notification) -> None:
        if notification in self.container.items:
            self.container.items.remove(notification)

    @property
    def active(self) -> List[Notification]:
        return list(self.container.items)
