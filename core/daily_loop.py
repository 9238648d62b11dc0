"""
WordLoop – Daily loop manager
==============================
The single application-state object.  Owns the WordSet (``all_words``),
the daily loop with its current index, the pending undo entry and the
user settings.  Every mutating operation persists what it changed and asks
the attached scheduler to re-issue the notification for the new current
word.

Timed work (the undo grace period) goes through the dispatcher so it runs
on the same thread as every other mutation.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from core.settings import (
    KEY_AUTO_CHANGE,
    KEY_CURRENT_INDEX,
    KEY_DAILY_WORDS,
    KEY_INTERVAL,
    Settings,
    is_allowed_interval,
)
from core.word_store import Word, WordStore, words_from_json, words_to_json

log = logging.getLogger(__name__)

LOOP_SIZE = 7
GRACE_PERIOD = 30.0       # seconds undo stays available
RESCHEDULE_DELAY = 1.0


class DailyLoop:
    """Words under review plus everything needed to rotate through them."""

    def __init__(
        self,
        store: WordStore,
        kv,
        dispatcher,
        *,
        rng: Optional[random.Random] = None,
        login_item=None,
    ) -> None:
        self._store = store
        self._kv = kv
        self._dispatcher = dispatcher
        self._rng = rng or random.Random()
        self._login_item = login_item
        self._scheduler = None
        self._listeners: List[Callable[[], None]] = []

        self.all_words: List[Word] = []
        self.daily_words: List[Word] = []
        self.current_index: int = 0
        self.last_learned: Optional[Word] = None
        self._grace_timer = None

        self.settings = Settings()

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def attach_scheduler(self, scheduler) -> None:
        self._scheduler = scheduler

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Call *callback* after every state change (UI refresh)."""
        self._listeners.append(callback)

    def _changed(self) -> None:
        for callback in self._listeners:
            callback()

    def start(self) -> None:
        """Load settings and the saved loop, sync with the bundle, start timers."""
        self.settings = Settings.load(self._kv)
        self._restore_progress()
        self.sync_with_bundle()
        self._restart_scheduler()
        self._changed()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def current_word(self) -> Optional[Word]:
        if 0 <= self.current_index < len(self.daily_words):
            return self.daily_words[self.current_index]
        return self.daily_words[0] if self.daily_words else None

    @property
    def menu_title(self) -> str:
        word = self.current_word
        return f"本 {word.text if word else '---'}"

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def sync_with_bundle(self) -> bool:
        """Merge the bundle into ``all_words`` and prune the loop.

        Returns False (leaving everything untouched) if the bundle is
        unreadable.
        """
        words = self._store.sync()
        if words is None:
            return False
        self.all_words = words
        self._clean_daily_words()
        self._changed()
        return True

    def _clean_daily_words(self) -> None:
        known = {w.text for w in self.all_words}
        self.daily_words = [w for w in self.daily_words if w.text in known]
        self._clamp_index()
        if self.last_learned is not None and self.last_learned.text not in known:
            self.last_learned = None
            self._cancel_grace_timer()

        if not self.daily_words:
            self._reseed()
        self._save_progress()

    def _reseed(self) -> None:
        unlearned = [w for w in self.all_words if not w.is_learned]
        count = min(LOOP_SIZE, len(unlearned))
        self.daily_words = self._rng.sample(unlearned, count)
        self.current_index = 0
        if self.daily_words:
            log.info("Reseeded daily loop with %d words", len(self.daily_words))

    def _clamp_index(self) -> None:
        if not (0 <= self.current_index < len(self.daily_words)):
            self.current_index = 0

    # ------------------------------------------------------------------
    # Loop operations
    # ------------------------------------------------------------------

    def mark_learned(self) -> None:
        """Move the current word out of the loop and flag it learned."""
        if not self.daily_words:
            return
        self._clamp_index()
        word = self.daily_words.pop(self.current_index).with_learned(True)

        self._cancel_grace_timer()
        self.last_learned = word
        self._grace_timer = self._dispatcher.call_later(
            GRACE_PERIOD, lambda: self._expire_last_learned(word.text)
        )

        self._set_learned(word.text, True)
        self._clamp_index()
        self._save_progress()
        log.info("Marked %r as learned (%d left in loop)", word.text, len(self.daily_words))
        self._reschedule()
        self._changed()

    def undo_last_learned(self) -> None:
        """Put the last learned word back at the current position."""
        word = self.last_learned
        if word is None:
            return
        word = word.with_learned(False)
        self.daily_words.insert(self.current_index, word)
        self._set_learned(word.text, False)

        self.last_learned = None
        self._cancel_grace_timer()
        self._clamp_index()
        self._save_progress()
        log.info("Undid learned mark for %r", word.text)
        self._reschedule()
        self._changed()

    def remove_from_loop(self, index: int) -> None:
        if not (0 <= index < len(self.daily_words)):
            return
        word = self.daily_words.pop(index)
        self._clamp_index()
        self._save_progress()
        log.info("Removed %r from daily loop", word.text)
        self._reschedule()
        self._changed()

    def add_new_word_to_loop(self) -> Optional[Word]:
        """Append a random unlearned word that is not in the loop yet."""
        in_loop = {w.text for w in self.daily_words}
        candidates = [w for w in self.all_words if not w.is_learned and w.text not in in_loop]
        if not candidates:
            return None
        word = self._rng.choice(candidates)
        self.daily_words.append(word)
        self._save_progress()
        log.info("Added %r to daily loop", word.text)
        self._reschedule()
        self._changed()
        return word

    def advance(self, automatic: bool = False) -> None:
        """Move to the next word.  Automatic ticks are ignored when
        auto-change is off."""
        if automatic and not self.settings.auto_change_enabled:
            return
        if not self.daily_words:
            return
        self.current_index = (self.current_index + 1) % len(self.daily_words)
        self._kv.set(KEY_CURRENT_INDEX, self.current_index)
        if self.settings.auto_change_enabled:
            self._reschedule()
        self._changed()

    def reset_all_data(self) -> None:
        """Wipe learned state and the loop, start fresh from the bundle."""
        self._kv.remove(KEY_DAILY_WORDS, KEY_CURRENT_INDEX)
        self._store.delete()

        self.daily_words = []
        self.current_index = 0
        if not self.sync_with_bundle():
            # No bundle: keep the words but drop the learned state with the file.
            self.all_words = [w.with_learned(False) for w in self.all_words]
            self._clean_daily_words()

        self.last_learned = None
        self._cancel_grace_timer()
        log.info("Reset all data")
        self._restart_scheduler()
        self._changed()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_interval(self, seconds: float) -> None:
        if not is_allowed_interval(seconds):
            raise ValueError(f"unsupported interval: {seconds!r}")
        self.settings.selected_interval = float(seconds)
        self._kv.set(KEY_INTERVAL, self.settings.selected_interval)
        self._restart_scheduler()
        self._changed()

    def set_auto_change(self, enabled: bool) -> None:
        self.settings.auto_change_enabled = bool(enabled)
        self._kv.set(KEY_AUTO_CHANGE, self.settings.auto_change_enabled)
        if enabled:
            self._restart_scheduler()
        elif self._scheduler is not None:
            self._scheduler.stop()
        self._changed()

    @property
    def launch_at_login(self) -> bool:
        return bool(self._login_item and self._login_item.is_enabled())

    def set_launch_at_login(self, enabled: bool) -> None:
        if self._login_item is None:
            log.warning("No login item configured")
            return
        self._login_item.set_enabled(enabled)
        self._changed()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _set_learned(self, text: str, flag: bool) -> None:
        for i, w in enumerate(self.all_words):
            if w.text == text:
                self.all_words[i] = w.with_learned(flag)
                self._store.save(self.all_words)
                return

    def _expire_last_learned(self, text: str) -> None:
        self._grace_timer = None
        if self.last_learned is not None and self.last_learned.text == text:
            self.last_learned = None
            self._changed()

    def _cancel_grace_timer(self) -> None:
        if self._grace_timer is not None:
            self._dispatcher.cancel(self._grace_timer)
            self._grace_timer = None

    def _reschedule(self) -> None:
        if self._scheduler is not None:
            self._scheduler.schedule_notification(delay=RESCHEDULE_DELAY)

    def _restart_scheduler(self) -> None:
        if self._scheduler is not None:
            self._scheduler.restart()

    def _save_progress(self) -> None:
        self._kv.set_many({
            KEY_DAILY_WORDS: words_to_json(self.daily_words),
            KEY_CURRENT_INDEX: self.current_index,
        })

    def _restore_progress(self) -> None:
        saved = self._kv.get(KEY_DAILY_WORDS)
        if saved is None:
            return
        try:
            self.daily_words = words_from_json(saved)
        except ValueError as exc:
            log.warning("Ignoring unreadable daily loop snapshot: %s", exc)
            return
        index = self._kv.get(KEY_CURRENT_INDEX, 0)
        self.current_index = index if isinstance(index, int) else 0
        self._clamp_index()
