"""Account repository for database operations."""

import asyncio
import sqlite3
from datetime import UTC, datetime
from uuid import UUID, uuid4

import structlog

from src.infrastructure.database import Database
from src.modules.auth.exceptions import AccountNotFoundError, DuplicateAccountError
from src.modules.auth.models import Account
from src.modules.auth.password import BCRYPT_ROUNDS, hash_password, verify_password

logger = structlog.get_logger()

_PUBLIC_COLUMNS = "id, email, created_at, updated_at"
_ALL_COLUMNS = "id, email, hashed_password, created_at, updated_at"


def _columns(include_secret: bool) -> str:
    return _ALL_COLUMNS if include_secret else _PUBLIC_COLUMNS


class UserRepository:
    """Repository for Account persistence.

    Passwords are hashed here, on ``create`` and ``set_password``, and the
    hash is only loaded when a caller asks for it with ``include_secret``.
    """

    def __init__(self, database: Database, *, bcrypt_rounds: int = BCRYPT_ROUNDS) -> None:
        """Initialize the repository.

        Args:
            database: Database connection.
            bcrypt_rounds: Cost factor for new password hashes.
        """
        self._db = database
        self._bcrypt_rounds = bcrypt_rounds

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(
            hash_password, password, rounds=self._bcrypt_rounds
        )

    async def create(self, email: str, password: str) -> Account:
        """Create a new account.

        Args:
            email: Email address, stored exactly as given.
            password: Plain text password.

        Returns:
            The created Account, without its password hash.

        Raises:
            DuplicateAccountError: If the email is already registered.
        """
        if await self.get_by_email(email) is not None:
            raise DuplicateAccountError(email)

        hashed = await self._hash(password)
        account_id = uuid4()
        now = datetime.now(UTC).isoformat()

        try:
            await self._db.execute(
                """
                INSERT INTO users (id, email, hashed_password, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (str(account_id), email, hashed, now, now),
            )
        except sqlite3.IntegrityError as e:
            # Lost a race with a concurrent signup for the same email
            if "UNIQUE constraint failed" in str(e):
                raise DuplicateAccountError(email) from e
            raise

        logger.info("user_created", user_id=str(account_id))

        return Account(
            id=account_id,
            email=email,
            password_hash=None,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    async def get_by_id(
        self, user_id: UUID, *, include_secret: bool = False
    ) -> Account | None:
        """Get an account by ID.

        Args:
            user_id: The account's UUID.
            include_secret: Whether to load the password hash.

        Returns:
            Account if found, None otherwise.
        """
        row = await self._db.fetch_one(
            f"SELECT {_columns(include_secret)} FROM users WHERE id = ?",  # nosec B608
            (str(user_id),),
        )

        if row is None:
            return None

        return Account.from_row(dict(row))

    async def get_by_email(
        self, email: str, *, include_secret: bool = False
    ) -> Account | None:
        """Get an account by exact email match.

        Args:
            email: The email address, compared case-sensitively.
            include_secret: Whether to load the password hash.

        Returns:
            Account if found, None otherwise.
        """
        row = await self._db.fetch_one(
            f"SELECT {_columns(include_secret)} FROM users WHERE email = ?",  # nosec B608
            (email,),
        )

        if row is None:
            return None

        return Account.from_row(dict(row))

    async def set_password(self, user_id: UUID, password: str) -> bool:
        """Replace an account's password if it changed.

        The stored hash is left untouched when ``password`` already matches
        it.

        Args:
            user_id: The account's UUID.
            password: New plain text password.

        Returns:
            True if a new hash was written, False if unchanged.

        Raises:
            AccountNotFoundError: If no account has this ID.
        """
        account = await self.get_by_id(user_id, include_secret=True)
        if account is None:
            raise AccountNotFoundError(str(user_id))

        unchanged = await asyncio.to_thread(
            verify_password, password, account.password_hash
        )
        if unchanged:
            return False

        hashed = await self._hash(password)
        await self._db.execute(
            "UPDATE users SET hashed_password = ?, updated_at = ? WHERE id = ?",
            (hashed, datetime.now(UTC).isoformat(), str(user_id)),
        )

        logger.info("user_password_changed", user_id=str(user_id))
        return True

    async def list_all(self) -> list[Account]:
        """List all accounts without their secrets.

        Returns:
            Accounts ordered by creation time.
        """
        rows = await self._db.fetch_all(
            f"SELECT {_PUBLIC_COLUMNS} FROM users ORDER BY created_at, rowid"  # nosec B608
        )
        return [Account.from_row(dict(row)) for row in rows]

    async def count(self) -> int:
        """Count total accounts.

        Returns:
            Number of accounts.
        """
        row = await self._db.fetch_one("SELECT COUNT(*) as count FROM users")
        return int(row["count"]) if row else 0
