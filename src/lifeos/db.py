"""SQLite connection management and the per-owner state snapshot table."""
import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from lifeos.config import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS app_states (
    owner_id TEXT PRIMARY KEY,
    state TEXT NOT NULL,
    updated_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


class StateRepository:
    """Load and save one JSON snapshot of the app state for a single owner.

    Failures are logged and reported through return values; nothing here
    raises into the caller, so in-memory state stays usable when the disk
    is not.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, owner_id: str = ""):
        self.db_path = db_path
        self.owner_id = owner_id

    def load(self) -> dict | None:
        try:
            init_db(self.db_path)
            conn = get_connection(self.db_path)
            row = conn.execute(
                "SELECT state FROM app_states WHERE owner_id = ?", (self.owner_id,)
            ).fetchone()
            conn.close()
        except (sqlite3.Error, OSError):
            logger.exception("Database load error for owner %s", self.owner_id)
            return None
        if row is None:
            return None
        try:
            return json.loads(row["state"])
        except json.JSONDecodeError:
            logger.exception("Stored state for owner %s is not valid JSON", self.owner_id)
            return None

    def save(self, state: dict) -> bool:
        try:
            payload = json.dumps(state)
            init_db(self.db_path)
            conn = get_connection(self.db_path)
            conn.execute(
                """INSERT INTO app_states (owner_id, state, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(owner_id) DO UPDATE SET state=excluded.state, updated_at=excluded.updated_at""",
                (self.owner_id, payload, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
            conn.close()
        except (sqlite3.Error, OSError, TypeError, ValueError):
            logger.exception("Database save error for owner %s", self.owner_id)
            return False
        return True

    def clear(self) -> bool:
        try:
            init_db(self.db_path)
            conn = get_connection(self.db_path)
            conn.execute("DELETE FROM app_states WHERE owner_id = ?", (self.owner_id,))
            conn.commit()
            conn.close()
        except (sqlite3.Error, OSError):
            logger.exception("Database clear error for owner %s", self.owner_id)
            return False
        return True
