"""
WordLoop – Word store & bundle sync
====================================
Reads the bundled reference word list and the persisted word file, merges
them and writes the result back.

Files use the same record shape::

    {"word": "serene", "meaning": "...", "example": "...",
     "pronunciation": "/səˈriːn/", "isLearned": false}

The bundle is the source of truth for content, the persisted file only
for learned flags.  Every read/write failure is logged and swallowed:
callers see ``None`` (nothing read) or ``False`` (nothing written).
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

log = logging.getLogger(__name__)

BUNDLED_WORDS_PATH = Path(__file__).resolve().parent / "assets" / "words.json"


# ---------------------------------------------------------------------------
# Word record
# ---------------------------------------------------------------------------

@dataclass
class Word:
    """One vocabulary entry.  Identity is ``text``; ``id`` is per-load only."""
    text: str
    meaning: str = ""
    example: str = ""
    pronunciation: str = ""
    is_learned: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()), compare=False)

    def with_learned(self, flag: bool) -> "Word":
        return replace(self, is_learned=flag)

    def to_dict(self) -> dict:
        return {
            "word": self.text,
            "meaning": self.meaning,
            "example": self.example,
            "pronunciation": self.pronunciation,
            "isLearned": self.is_learned,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Word":
        """Build a Word from a JSON record.

        Raises ``ValueError`` if *data* is not a record with a ``word`` string.
        """
        if not isinstance(data, dict):
            raise ValueError(f"word record must be an object, got {type(data).__name__}")
        text = data.get("word")
        if not isinstance(text, str) or not text:
            raise ValueError(f"word record has no 'word': {data!r}")
        return cls(
            text=text,
            meaning=str(data.get("meaning") or ""),
            example=str(data.get("example") or ""),
            pronunciation=str(data.get("pronunciation") or ""),
            is_learned=bool(data.get("isLearned", False)),
        )


def words_from_json(payload) -> List[Word]:
    """Decode a JSON array of word records (all-or-nothing)."""
    if not isinstance(payload, list):
        raise ValueError("word file must contain a JSON array")
    return [Word.from_dict(item) for item in payload]


def words_to_json(words: List[Word]) -> list:
    return [w.to_dict() for w in words]


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

def merge_words(bundle: List[Word], persisted: List[Word]) -> List[Word]:
    """One entry per bundled word (first occurrence wins), learned flag
    carried over from the persisted word with the same text.

    Words only present in *persisted* are dropped.
    """
    learned = {}
    for w in persisted:
        learned.setdefault(w.text, w.is_learned)

    merged: List[Word] = []
    seen: set[str] = set()
    for w in bundle:
        if w.text in seen:
            continue
        seen.add(w.text)
        merged.append(w.with_learned(learned.get(w.text, False)))
    return merged


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class WordStore:
    """Bundled list + persisted word file."""

    def __init__(self, bundle_path: Path | str = BUNDLED_WORDS_PATH, words_path: Path | str | None = None):
        if words_path is None:
            from db.database import WORDS_PATH
            words_path = WORDS_PATH
        self.bundle_path = Path(bundle_path)
        self.words_path = Path(words_path)

    # ── Reading ──────────────────────────────────────────────────────

    def _read(self, path: Path) -> Optional[List[Word]]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            words = words_from_json(payload)
        except FileNotFoundError:
            log.info("Word file %s does not exist", path)
            return None
        except (OSError, ValueError) as exc:
            log.warning("Could not read word file %s: %s", path, exc)
            return None
        log.info("Read %d words from %s", len(words), path.name)
        return words

    def load_bundle(self) -> Optional[List[Word]]:
        """Bundled reference words with learned flags reset, or None."""
        words = self._read(self.bundle_path)
        if words is None:
            return None
        return [w.with_learned(False) for w in words]

    def load_persisted(self) -> Optional[List[Word]]:
        return self._read(self.words_path)

    # ── Writing ──────────────────────────────────────────────────────

    def save(self, words: List[Word]) -> bool:
        """Overwrite the word file with *words*. Returns True on success."""
        tmp_path = self.words_path.with_suffix(".tmp")
        try:
            self.words_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(words_to_json(words), f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.words_path)
        except OSError as exc:
            log.warning("Could not save word file %s: %s", self.words_path, exc)
            tmp_path.unlink(missing_ok=True)
            return False
        return True

    def delete(self) -> None:
        try:
            self.words_path.unlink()
            log.info("Deleted word file %s", self.words_path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            log.warning("Could not delete word file %s: %s", self.words_path, exc)

    # ── Sync ─────────────────────────────────────────────────────────

    def sync(self) -> Optional[List[Word]]:
        """Merge bundle with persisted flags, save and return the WordSet.

        Returns None (and writes nothing) if the bundle cannot be read.
        """
        bundle = self.load_bundle()
        if bundle is None:
            log.warning("Bundled word list unavailable, skipping sync")
            return None

        words = merge_words(bundle, self.load_persisted() or [])

        self.save(words)
        log.info(
            "Synced %d words (%d learned)",
            len(words), sum(1 for w in words if w.is_learned),
        )
        return words
