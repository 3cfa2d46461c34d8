"""Database schema for local session state."""

SCHEMA = """
-- One row per persisted session value; values are text (JSON or raw)
CREATE TABLE IF NOT EXISTS session_state (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""
