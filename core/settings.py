"""
WordLoop – User settings
=========================
Allowed update intervals, defaults and the key names used in the
key-value store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

log = logging.getLogger(__name__)

# Label shown in the UI → interval in seconds
INTERVAL_CHOICES: dict[str, float] = {
    "10 Seconds": 10.0,
    "15 Minutes": 900.0,
    "30 Minutes": 1800.0,
    "45 Minutes": 2700.0,
    "1 Hour": 3600.0,
    "2 Hours": 7200.0,
}
DEFAULT_INTERVAL = 1800.0

# Key-value store keys
KEY_INTERVAL = "selected_interval"
KEY_AUTO_CHANGE = "auto_change_enabled"
KEY_DAILY_WORDS = "daily_words"
KEY_CURRENT_INDEX = "current_index"


def is_allowed_interval(seconds) -> bool:
    try:
        return float(seconds) in INTERVAL_CHOICES.values()
    except (TypeError, ValueError):
        return False


def interval_label(seconds: float) -> str:
    """Return the UI label for *seconds* (falls back to the raw number)."""
    for label, value in INTERVAL_CHOICES.items():
        if value == seconds:
            return label
    return f"{seconds:g} Seconds"


@dataclass
class Settings:
    auto_change_enabled: bool = False
    selected_interval: float = DEFAULT_INTERVAL

    @classmethod
    def load(cls, store) -> "Settings":
        """Read settings from *store*; unknown or zero intervals use the default."""
        raw_interval = store.get(KEY_INTERVAL)
        if raw_interval is None:
            interval = DEFAULT_INTERVAL
        elif is_allowed_interval(raw_interval):
            interval = float(raw_interval)
        else:
            log.warning("Ignoring stored interval %r, using %gs", raw_interval, DEFAULT_INTERVAL)
            interval = DEFAULT_INTERVAL
        return cls(
            auto_change_enabled=bool(store.get(KEY_AUTO_CHANGE, False)),
            selected_interval=interval,
        )
