"""
Shared fixtures: a manual-clock dispatcher, an in-memory settings store,
and bundled word files in a temp directory.
"""

import json
import random
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.daily_loop import DailyLoop
from core.notifications import NotificationCenter
from core.scheduler import Scheduler
from core.word_store import WordStore
from db.kv_store import KeyValueStore
from db.models import Base


class FakeDispatcher:
    """``call_later``/``cancel`` driven by :meth:`advance` instead of a clock."""

    def __init__(self):
        self.now = 0.0
        self._queue = {}
        self._next_handle = 0

    def call_later(self, seconds, callback):
        self._next_handle += 1
        self._queue[self._next_handle] = (self.now + seconds, self._next_handle, callback)
        return self._next_handle

    def cancel(self, handle):
        self._queue.pop(handle, None)

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [(when, handle) for when, handle, _ in self._queue.values() if when <= target]
            if not due:
                break
            when, handle = min(due)
            _, _, callback = self._queue.pop(handle)
            self.now = when
            callback()
        self.now = target

    @property
    def pending(self):
        return len(self._queue)


def word_record(text, learned=False):
    return {
        "word": text,
        "meaning": f"meaning of {text}",
        "example": f"An example with {text}.",
        "pronunciation": f"/{text}/",
        "isLearned": learned,
    }


def write_words(path, texts, learned=()):
    path.write_text(
        json.dumps([word_record(t, t in learned) for t in texts]),
        encoding="utf-8",
    )
    return path


TEN_WORDS = ["alpha", "bravo", "charlie", "delta", "echo",
             "foxtrot", "golf", "hotel", "india", "juliet"]


@pytest.fixture
def word_file():
    """Factory writing a word list: ``word_file(path, texts, learned=())``."""
    return write_words


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def kv():
    """Key-value store over a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    yield KeyValueStore(factory)
    engine.dispose()


@pytest.fixture
def bundle_path(tmp_path):
    return write_words(tmp_path / "bundle.json", TEN_WORDS)


@pytest.fixture
def store(tmp_path, bundle_path):
    return WordStore(bundle_path, tmp_path / "data" / "words.json")


@pytest.fixture
def make_loop(store, kv, dispatcher):
    """Build a started DailyLoop (optionally with a scheduler attached)."""

    def _make(*, seed=7, with_scheduler=False, hour=12, deliver=None):
        loop = DailyLoop(store, kv, dispatcher, rng=random.Random(seed))
        scheduler = None
        if with_scheduler:
            center = NotificationCenter(dispatcher, deliver=deliver or (lambda r, o: None))
            scheduler = Scheduler(
                loop, dispatcher, center,
                now=lambda: datetime(2026, 10, 17, hour, 0),
            )
        loop.start()
        return loop, scheduler

    return _make
