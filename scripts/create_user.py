#!/usr/bin/env python3
"""CLI script to create accounts.

Usage:
    uv run python scripts/create_user.py user@example.com password123
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api.errors import RequestValidationError
from src.api.validation import SIGNUP_VALIDATOR
from src.config import Settings
from src.infrastructure.database import init_database
from src.modules.auth.exceptions import DuplicateAccountError
from src.modules.auth.repository import UserRepository


async def create_user(email: str, password: str) -> None:
    """Create an account in the database.

    Args:
        email: Account email address.
        password: Account password (will be hashed).
    """
    settings = Settings()

    # Same startup precondition as the service
    if settings.jwt_key is None:
        print("✗ Error: JWT_KEY not set in .env", file=sys.stderr)
        sys.exit(1)

    try:
        data = SIGNUP_VALIDATOR.validate({"email": email, "password": password})
    except RequestValidationError as e:
        for error in e.errors:
            print(f"✗ {error.field}: {error.message}", file=sys.stderr)
        sys.exit(1)

    db = await init_database(settings.database_path)

    try:
        repo = UserRepository(db, bcrypt_rounds=settings.bcrypt_rounds)
        account = await repo.create(data["email"], data["password"])

        print(f"✓ Created account: {account.email}")
        print(f"  Account ID: {account.id}")
        print(f"  Created at: {account.created_at}")

    except DuplicateAccountError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        await db.disconnect()


def main() -> None:
    """Parse arguments and create the account."""
    parser = argparse.ArgumentParser(
        description="Create an account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run python scripts/create_user.py user@example.com mypassword
  uv run python scripts/create_user.py test1@test.com pass123
        """,
    )

    parser.add_argument("email", help="Account email address")
    parser.add_argument("password", help="Account password (4 to 20 characters)")

    args = parser.parse_args()

    asyncio.run(create_user(args.email, args.password))


if __name__ == "__main__":
    main()
