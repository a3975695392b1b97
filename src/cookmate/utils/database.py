"""Database utilities for persisting user preferences."""

import sqlite3
import logging
from contextlib import contextmanager
from typing import Optional
from pathlib import Path

from cookmate.models.preferences import UserPreferences

logger = logging.getLogger(__name__)

_COLUMNS = (
    'user_id', 'name', 'age', 'gender', 'dietary_preference', 'spiciness_level',
    'cuisine_preferences', 'ingredient_dislikes', 'cook_name', 'cook_whatsapp',
    'preferred_language', 'user_whatsapp', 'meals_per_day',
    'breakfast', 'lunch', 'dinner', 'created_at',
)


def init_database(db_path: str) -> None:
    """Initialize SQLite database with required tables."""
    db_file = Path(db_path)
    db_file.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS user_preferences (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT UNIQUE,
                name TEXT NOT NULL,
                age INTEGER,
                gender TEXT,
                dietary_preference TEXT,
                spiciness_level INTEGER,
                cuisine_preferences TEXT,
                ingredient_dislikes TEXT,
                cook_name TEXT,
                cook_whatsapp TEXT,
                preferred_language TEXT,
                user_whatsapp TEXT,
                meals_per_day INTEGER,
                breakfast INTEGER NOT NULL DEFAULT 0,
                lunch INTEGER NOT NULL DEFAULT 0,
                dinner INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_created_at ON user_preferences(created_at)')

        conn.commit()
        logger.info(f"Database initialized at {db_path}")


@contextmanager
def get_db_connection(db_path: str):
    """Context manager for database connections."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def save_preferences(preferences: UserPreferences, db_path: str) -> int:
    """Save preferences and return the row id.

    A submission for a ``user_id`` that already has preferences replaces them.
    """
    data = preferences.to_dict()
    placeholders = ', '.join('?' * len(_COLUMNS))

    with get_db_connection(db_path) as conn:
        cursor = conn.cursor()
        if preferences.user_id:
            cursor.execute('DELETE FROM user_preferences WHERE user_id = ?', (preferences.user_id,))
        cursor.execute(
            f'INSERT INTO user_preferences ({", ".join(_COLUMNS)}) VALUES ({placeholders})',
            tuple(data[column] for column in _COLUMNS)
        )
        conn.commit()
        preferences.id = cursor.lastrowid

    logger.debug(f"Saved preferences {preferences.id} for {preferences.name}")
    return preferences.id


def load_preferences(preference_id: int, db_path: str) -> Optional[UserPreferences]:
    """Load a specific preferences record from the database."""
    with get_db_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute('SELECT * FROM user_preferences WHERE id = ?', (preference_id,))
        row = cursor.fetchone()

        if row:
            return UserPreferences.from_dict(dict(row))
        return None


def load_preferences_for_user(user_id: str, db_path: str) -> Optional[UserPreferences]:
    """Load the preferences registered for a user id."""
    with get_db_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute('SELECT * FROM user_preferences WHERE user_id = ?', (user_id,))
        row = cursor.fetchone()

        if row:
            return UserPreferences.from_dict(dict(row))
        return None

