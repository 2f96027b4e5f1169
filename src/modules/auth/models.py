"""Account domain model."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Account:
    """Account domain model.

    Represents a registered user who can sign in and receive a session.

    Attributes:
        id: Unique account identifier.
        email: Email address, unique and case-sensitive as stored.
        password_hash: bcrypt hash, or None when loaded without the secret.
        created_at: When the account was created.
        updated_at: When the account was last updated.
    """

    id: UUID
    email: str
    password_hash: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, object]) -> "Account":
        """Create an Account from a database row.

        The secret is only populated when the row selected it.

        Args:
            row: Database row as a mapping.

        Returns:
            Account instance.
        """
        hashed = row.get("hashed_password")
        return cls(
            id=UUID(str(row["id"])),
            email=str(row["email"]),
            password_hash=str(hashed) if hashed else None,
            created_at=datetime.fromisoformat(str(row["created_at"])),
            updated_at=datetime.fromisoformat(str(row["updated_at"])),
        )
