"""
WordLoop – Key-value settings store
====================================
Small wrapper over the ``settings`` table.  Values are stored as JSON so
booleans, numbers and the daily-loop snapshot share one column.

Writes are best effort: a database error is logged and the in-memory
state stays authoritative.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import Setting

log = logging.getLogger(__name__)


class KeyValueStore:
    """JSON values keyed by short strings, persisted through SQLAlchemy."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for *key*, or *default*."""
        s = self._session_factory()
        try:
            row = s.get(Setting, key)
            if row is None:
                return default
            return json.loads(row.value)
        except (SQLAlchemyError, ValueError) as exc:
            log.warning("Could not read setting %r: %s", key, exc)
            return default
        finally:
            s.close()

    def set(self, key: str, value: Any) -> bool:
        """Store *value* under *key*. Returns True on success."""
        return self.set_many({key: value})

    def set_many(self, values: dict[str, Any]) -> bool:
        """Store several keys in one transaction."""
        s = self._session_factory()
        try:
            for key, value in values.items():
                encoded = json.dumps(value, ensure_ascii=False)
                row = s.get(Setting, key)
                if row is None:
                    s.add(Setting(key=key, value=encoded))
                else:
                    row.value = encoded
            s.commit()
            return True
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            s.rollback()
            log.warning("Could not write settings %s: %s", sorted(values), exc)
            return False
        finally:
            s.close()

    def remove(self, *keys: str) -> None:
        """Delete *keys*; missing keys are ignored."""
        s = self._session_factory()
        try:
            s.query(Setting).filter(Setting.key.in_(keys)).delete(
                synchronize_session=False
            )
            s.commit()
        except SQLAlchemyError as exc:
            s.rollback()
            log.warning("Could not remove settings %s: %s", keys, exc)
        finally:
            s.close()

