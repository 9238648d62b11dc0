"""
WordLoop – Rotation timer & notification scheduling
====================================================
Two triggers driven by the (auto-change, interval) setting pair:

* a repeating timer that advances the daily loop every interval;
* a one-shot notification for the current word, limited to daytime hours.

Timers go through a *dispatcher* exposing ``call_later(seconds, callback)``
and ``cancel(handle)``.  In the app that is the Tk event loop, so every
callback runs on the UI thread.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from core.notifications import NotificationRequest, TimeIntervalTrigger

log = logging.getLogger(__name__)

# Notification time limits
START_HOUR = 8    # 08:00
END_HOUR = 23     # 23:00

NOTIFICATION_ID = "word_notification"
MIN_DELAY = 1.0


class Scheduler:
    """Auto-advance timer plus the at-most-one pending word notification."""

    def __init__(
        self,
        loop,
        dispatcher,
        center,
        *,
        start_hour: int = START_HOUR,
        end_hour: int = END_HOUR,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._loop = loop
        self._dispatcher = dispatcher
        self.center = center
        self.start_hour = start_hour
        self.end_hour = end_hour
        self._now = now
        self._timer = None
        loop.attach_scheduler(self)

    @property
    def running(self) -> bool:
        return self._timer is not None

    # ------------------------------------------------------------------
    # Repeat timer
    # ------------------------------------------------------------------

    def start(self) -> None:
        """(Re)start the timer for the current settings."""
        self._cancel_timer()
        settings = self._loop.settings
        if settings.auto_change_enabled:
            self._arm(settings.selected_interval)
            log.info("Auto-advance every %gs", settings.selected_interval)
            self.schedule_notification(delay=MIN_DELAY)
        else:
            log.info("Auto-advance disabled")

    restart = start

    def stop(self) -> None:
        """Stop the timer and drop the pending notification."""
        self._cancel_timer()
        self.cancel_notifications()

    def _arm(self, interval: float) -> None:
        self._timer = self._dispatcher.call_later(interval, lambda: self._tick(interval))

    def _tick(self, interval: float) -> None:
        self._timer = None
        self._arm(interval)
        self._loop.advance(automatic=True)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._dispatcher.cancel(self._timer)
            self._timer = None

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def in_allowed_hours(self) -> bool:
        hour = self._now().hour
        return self.start_hour <= hour < self.end_hour

    def schedule_notification(self, delay: Optional[float] = None) -> None:
        """Replace the pending notification with one for the current word.

        *delay* defaults to the selected interval; anything under one second
        is raised to one second.
        """
        self.cancel_notifications()

        settings = self._loop.settings
        word = self._loop.current_word
        if word is None or not settings.auto_change_enabled:
            return

        if not self.in_allowed_hours():
            log.info("Notification skipped due to time restriction (hour: %d)", self._now().hour)
            return

        seconds = max(settings.selected_interval if delay is None else delay, MIN_DELAY)
        request = NotificationRequest(
            identifier=NOTIFICATION_ID,
            title=word.text,
            body=f"{word.pronunciation} - {word.meaning}",
            trigger=TimeIntervalTrigger(seconds=seconds, repeats=False),
        )
        try:
            self.center.add(request)
        except Exception as exc:  # notification backends raise their own types
            log.error("Error scheduling notification: %s", exc)
            return
        log.info("Notification scheduled in %g seconds.", seconds)

    def cancel_notifications(self) -> None:
        self.center.remove_all_pending()
