"""Shared fixtures for the test suite."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.infrastructure.database import Database
from src.main import create_app
from src.modules.auth.repository import UserRepository
from src.modules.auth.tokens import SessionTokenIssuer

TEST_JWT_KEY = "test-signing-key-for-testing-only-0123456789"

# Minimum bcrypt cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings for a test app backed by a temporary database."""
    return Settings(
        _env_file=None,
        environment="test",
        jwt_key=TEST_JWT_KEY,
        database_path=str(tmp_path / "test.db"),
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        log_json=False,
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Test client running the full app lifespan."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Create a temporary test database."""
    db = Database(tmp_path / "test.db")
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def repository(database: Database) -> UserRepository:
    """Create a user repository with test database."""
    return UserRepository(database, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def issuer() -> SessionTokenIssuer:
    """Token issuer with the test signing key."""
    return SessionTokenIssuer(TEST_JWT_KEY)


@pytest.fixture
def jwt_key() -> str:
    """The signing key used by test apps and issuers."""
    return TEST_JWT_KEY
