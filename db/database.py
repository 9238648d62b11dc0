"""
WordLoop – Database initialisation & session management
========================================================
Resolves the per-user data directory, creates the SQLite settings
database inside it and provides a session factory for the rest of the app.
"""

import os
import sys
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from db.models import Base

# ---------------------------------------------------------------------------
# Resolve a user-data directory that survives packaging with PyInstaller.
# ---------------------------------------------------------------------------

DATA_DIR_ENV = "WORDLOOP_DATA_DIR"


def _app_data_dir() -> Path:
    """Return a stable directory for the SQLite file and the word file."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        data_dir = Path(override).expanduser()
    else:
        if getattr(sys, "frozen", False):
            # Running as a PyInstaller bundle
            base = Path(sys.executable).parent
        else:
            base = Path(__file__).resolve().parent.parent
        data_dir = base / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


DATA_DIR = _app_data_dir()
DB_PATH = DATA_DIR / "wordloop.db"
WORDS_PATH = DATA_DIR / "words.json"
DATABASE_URL = f"sqlite:///{DB_PATH}"

engine = create_engine(DATABASE_URL, echo=False)

SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def init_db() -> None:
    """Create all tables if they do not exist yet."""
    Base.metadata.create_all(bind=engine)


def get_session() -> Session:
    """Return a new SQLAlchemy session."""
    return SessionLocal()
