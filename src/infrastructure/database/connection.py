"""Account store backed by a single aiosqlite connection."""

import sqlite3
from pathlib import Path

import aiosqlite
import structlog

logger = structlog.get_logger()

Parameters = tuple[object, ...] | dict[str, object] | None

# The UNIQUE constraint on email is what settles concurrent signups
ACCOUNTS_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT UNIQUE NOT NULL,
    hashed_password TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_users_created ON users(created_at);
"""


class Database:
    """Owns the account store connection for the lifetime of the app.

    Writes go through ``execute``, which commits immediately. Reads go
    through ``fetch_one``/``fetch_all`` and never commit.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("Database not connected")
        return self._connection

    async def connect(self) -> None:
        """Open the connection and create the schema if it is missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        connection = await aiosqlite.connect(self.path)
        connection.row_factory = aiosqlite.Row
        await connection.executescript(ACCOUNTS_SCHEMA)
        await connection.commit()
        self._connection = connection

        logger.info("database_connected", path=str(self.path))

    async def disconnect(self) -> None:
        if self._connection is None:
            return
        await self._connection.close()
        self._connection = None
        logger.info("database_disconnected", path=str(self.path))

    async def execute(self, sql: str, parameters: Parameters = None) -> int:
        """Run a write statement and commit it.

        Returns:
            Number of rows the statement changed.

        Raises:
            RuntimeError: If the database is not connected.
            sqlite3.IntegrityError: If a constraint is violated.
        """
        connection = self._require_connection()

        # No rollback: the connection is shared and SQLite undoes the failed statement
        async with connection.execute(sql, parameters or ()) as cursor:
            changed = cursor.rowcount
        await connection.commit()
        return changed

    async def fetch_one(
        self, sql: str, parameters: Parameters = None
    ) -> sqlite3.Row | None:
        """Return the first row of a query, or None."""
        connection = self._require_connection()
        async with connection.execute(sql, parameters or ()) as cursor:
            row: sqlite3.Row | None = await cursor.fetchone()
        return row

    async def fetch_all(self, sql: str, parameters: Parameters = None) -> list[sqlite3.Row]:
        """Return every row of a query."""
        connection = self._require_connection()
        async with connection.execute(sql, parameters or ()) as cursor:
            rows = await cursor.fetchall()
        return list(rows)


async def init_database(db_path: str | Path) -> Database:
    """Open the account store at ``db_path``.

    Args:
        db_path: Path to the SQLite database file, created if absent.

    Returns:
        Connected database instance.
    """
    database = Database(db_path)
    await database.connect()
    return database
