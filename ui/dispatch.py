"""
WordLoop – Tk event-loop dispatcher
====================================
Runs delayed callbacks on the Tk main loop so timers never touch shared
state from another thread.
"""

from __future__ import annotations

import logging
from typing import Callable

log = logging.getLogger(__name__)


class TkDispatcher:
    """``call_later``/``cancel`` on top of ``widget.after``."""

    def __init__(self, widget) -> None:
        self._widget = widget

    def call_later(self, seconds: float, callback: Callable[[], None]) -> str:
        return self._widget.after(max(int(seconds * 1000), 1), self._guard(callback))

    def cancel(self, handle: str) -> None:
        self._widget.after_cancel(handle)

    @staticmethod
    def _guard(callback: Callable[[], None]) -> Callable[[], None]:
        def run() -> None:
            try:
                callback()
            except Exception:
                # Tk would print and drop it; log it with the rest.
                log.exception("Scheduled callback failed")
        return run
