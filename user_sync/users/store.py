"""User table storage: repository interface + Postgres implementation.

The webhook handler issues exactly one call per event against a UserStore.
Errors from the database propagate to the caller; the sync service decides
how they map to HTTP responses.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import psycopg
from psycopg.rows import dict_row

from user_sync.users.models import User

logger = logging.getLogger(__name__)

_USER_COLUMNS = "clerk_id, username, display_name, avatar_url, created_at, updated_at"


class UserStore(ABC):
    """Abstract repository for User records."""

    @abstractmethod
    def create_user(self, user: User) -> User:
        """Insert a new user. Fails if the clerk_id already exists."""

    @abstractmethod
    def update_user(self, clerk_id: str, *, username: str, avatar_url: str | None) -> User | None:
        """Overwrite username and avatar. Returns None if no row matched."""

    @abstractmethod
    def delete_user(self, clerk_id: str) -> bool:
        """Delete a user. Returns False if no row matched."""


class PostgresUserStore(UserStore):
    """UserStore backed by a Postgres `users` table.

    Every call opens its own autocommit connection, so concurrent requests
    never share a connection or transaction.
    """

    def __init__(self, dsn: str):
        self._dsn = dsn

    def _get_conn(self) -> psycopg.Connection:
        return psycopg.connect(self._dsn, autocommit=True, row_factory=dict_row)

    def init_user_table(self) -> None:
        """Create the users table if it doesn't exist.  Idempotent."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    clerk_id      TEXT PRIMARY KEY,
                    username      TEXT NOT NULL,
                    display_name  TEXT NOT NULL,
                    avatar_url    TEXT,
                    created_at    TIMESTAMPTZ NOT NULL DEFAULT now(),
                    updated_at    TIMESTAMPTZ NOT NULL DEFAULT now()
                )
            """)
        logger.info("User table initialized")

    def create_user(self, user: User) -> User:
        with self._get_conn() as conn:
            row = conn.execute(
                f"""INSERT INTO users (clerk_id, username, display_name, avatar_url)
                    VALUES (%s, %s, %s, %s)
                    RETURNING {_USER_COLUMNS}""",
                (user.clerk_id, user.username, user.display_name, user.avatar_url),
            ).fetchone()
        return User.from_row(row)

    def update_user(self, clerk_id: str, *, username: str, avatar_url: str | None) -> User | None:
        with self._get_conn() as conn:
            row = conn.execute(
                f"""UPDATE users
                    SET username = %s, avatar_url = %s, updated_at = now()
                    WHERE clerk_id = %s
                    RETURNING {_USER_COLUMNS}""",
                (username, avatar_url, clerk_id),
            ).fetchone()
        return User.from_row(row) if row else None

    def delete_user(self, clerk_id: str) -> bool:
        with self._get_conn() as conn:
            result = conn.execute(
                "DELETE FROM users WHERE clerk_id = %s",
                (clerk_id,),
            )
            return result.rowcount > 0
