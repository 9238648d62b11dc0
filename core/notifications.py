"""
WordLoop – Local notification channel
======================================
A tiny stand-in for an OS notification center: requests carry a fixed
identifier and a one-shot time-interval trigger.  Adding a request with an
identifier that is already pending replaces it, so reusing one identifier
keeps at most one notification outstanding.

Delivery runs through the dispatcher (the Tk event loop in the app), asks
the registered presentation handler how to present, then posts a desktop
notification with ``plyer``.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

log = logging.getLogger(__name__)

APP_NAME = "WordLoop"


class PresentationOptions(enum.Flag):
    NONE = 0
    BANNER = enum.auto()
    SOUND = enum.auto()
    LIST = enum.auto()


@dataclass(frozen=True)
class TimeIntervalTrigger:
    seconds: float
    repeats: bool = False

    def __post_init__(self):
        if self.seconds < 1.0:
            raise ValueError(f"trigger interval must be >= 1s, got {self.seconds}")
        if self.repeats and self.seconds < 60.0:
            raise ValueError("repeating triggers must be at least 60s apart")


@dataclass(frozen=True)
class NotificationRequest:
    identifier: str
    title: str
    body: str
    trigger: TimeIntervalTrigger


def plyer_deliver(request: NotificationRequest, options: PresentationOptions) -> None:
    """Post *request* as a desktop notification."""
    from plyer import notification

    notification.notify(
        title=request.title,
        message=request.body,
        app_name=APP_NAME,
        timeout=10,
    )


PresentationHandler = Callable[[NotificationRequest], PresentationOptions]
Deliver = Callable[[NotificationRequest, PresentationOptions], None]


class NotificationCenter:
    """Pending notification requests, keyed by identifier."""

    def __init__(self, dispatcher, deliver: Optional[Deliver] = None) -> None:
        self._dispatcher = dispatcher
        self._deliver = deliver or plyer_deliver
        self._pending: Dict[str, Tuple[NotificationRequest, object]] = {}
        self._presentation_handler: Optional[PresentationHandler] = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def set_presentation_handler(self, handler: Optional[PresentationHandler]) -> None:
        """Register the callback asked how to present a notification that
        fires while the app is running."""
        self._presentation_handler = handler

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def add(self, request: NotificationRequest) -> None:
        """Schedule *request*, replacing a pending one with the same identifier."""
        self._cancel(request.identifier)
        handle = self._dispatcher.call_later(
            request.trigger.seconds, lambda: self._fire(request.identifier)
        )
        self._pending[request.identifier] = (request, handle)

    def remove_all_pending(self) -> None:
        for identifier in list(self._pending):
            self._cancel(identifier)

    def pending_requests(self) -> List[NotificationRequest]:
        return [request for request, _ in self._pending.values()]

    def _cancel(self, identifier: str) -> None:
        entry = self._pending.pop(identifier, None)
        if entry is not None:
            self._dispatcher.cancel(entry[1])

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def _fire(self, identifier: str) -> None:
        entry = self._pending.pop(identifier, None)
        if entry is None:
            return
        request = entry[0]

        if request.trigger.repeats:
            self.add(request)

        options = PresentationOptions.BANNER
        if self._presentation_handler is not None:
            options = self._presentation_handler(request)
        if not options:
            log.info("Notification %r suppressed by presentation handler", identifier)
            return

        try:
            self._deliver(request, options)
            log.info("Delivered notification %r: %s", identifier, request.title)
        except Exception as exc:  # backend-specific errors (dbus, win10toast, ...)
            log.error("Error delivering notification %r: %s", identifier, exc)
