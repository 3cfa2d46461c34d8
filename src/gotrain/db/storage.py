"""SQLite key-value storage for goals, plan, transcript and cached data."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from ..exceptions import StorageError
from .schema import SCHEMA


logger = logging.getLogger(__name__)


class StorageKey(str, Enum):
    """Keys of persisted session values."""
    USER_GOALS = "user_goals"
    PLAN_TEXT = "plan_text"
    CHAT_MESSAGES = "chat_messages"
    ACTIVITIES = "activities"
    STRENGTH_STATS = "strength_stats"
    STRAVA_CREDENTIALS = "strava_credentials"


# Scoped to one connected account; wiped together on disconnect.
# Goals are not in this list: they live until the user resets them.
SESSION_KEYS = (
    StorageKey.PLAN_TEXT,
    StorageKey.CHAT_MESSAGES,
    StorageKey.ACTIVITIES,
    StorageKey.STRENGTH_STATS,
)


class SessionStorage:
    """SQLite-backed key-value store."""

    def __init__(self, db_path: Union[str, Path] = "gotrain.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database tables."""
        with self._get_connection() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open session database: {e}", "connect")
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Session database error: {e}", "query")
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_text(self, key: StorageKey) -> Optional[str]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM session_state WHERE key = ?",
                (key.value,),
            ).fetchone()
        return row["value"] if row else None

    def set_text(self, key: StorageKey, value: str) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO session_state (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                (key.value, value),
            )

    def get_json(self, key: StorageKey, default: Any = None) -> Any:
        """Load a JSON value; unreadable values are treated as absent."""
        text = self.get_text(key)
        if text is None:
            return default
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupt stored value for {key.value}")
            return default

    def set_json(self, key: StorageKey, value: Any) -> None:
        self.set_text(key, json.dumps(value, ensure_ascii=False))

    def delete(self, *keys: StorageKey) -> None:
        self._delete(keys)

    def _delete(self, keys: Iterable[StorageKey]) -> None:
        values = [k.value for k in keys]
        if not values:
            return
        placeholders = ",".join("?" for _ in values)
        with self._get_connection() as conn:
            conn.execute(
                f"DELETE FROM session_state WHERE key IN ({placeholders})",
                values,
            )

    def clear_account(self) -> None:
        """Delete credentials, plan, transcript and cached data in one transaction."""
        self._delete([StorageKey.STRAVA_CREDENTIALS, *SESSION_KEYS])
        logger.info("Cleared account and session state")
