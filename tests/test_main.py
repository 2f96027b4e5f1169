"""Tests for application startup and configuration."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.main import create_app
from src.modules.auth.exceptions import ConfigurationError


def make_settings(tmp_path: Path, **overrides: object) -> Settings:
    values: dict[str, object] = {
        "environment": "test",
        "jwt_key": "test-signing-key-for-testing-only-0123456789",
        "database_path": str(tmp_path / "app.db"),
        "bcrypt_rounds": 4,
        "log_json": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[arg-type]


class TestStartup:
    """Tests for the startup precondition."""

    @pytest.mark.parametrize("jwt_key", [None, ""])
    def test_missing_jwt_key_aborts_startup(
        self, tmp_path: Path, jwt_key: str | None
    ) -> None:
        """The app must refuse to start without a signing key."""
        app = create_app(make_settings(tmp_path, jwt_key=jwt_key))

        with pytest.raises(ConfigurationError, match="JWT_KEY must be defined"):
            with TestClient(app):
                pass

    def test_missing_jwt_key_creates_no_database(self, tmp_path: Path) -> None:
        """Startup should fail before touching storage."""
        app = create_app(make_settings(tmp_path, jwt_key=None))

        with pytest.raises(ConfigurationError):
            with TestClient(app):
                pass

        assert not (tmp_path / "app.db").exists()

    def test_starts_with_jwt_key(self, client: TestClient) -> None:
        """A configured app should serve requests."""
        response = client.get("/api/users/currentuser")

        assert response.status_code == 200

    def test_routes_are_mounted_under_prefix(self, client: TestClient) -> None:
        """Credential routes live under /api/users only."""
        assert client.post("/signout").status_code == 404
        assert client.post("/api/users/signout").status_code == 200

    def test_docs_disabled_by_default(self, client: TestClient) -> None:
        assert client.get("/docs").status_code == 404


class TestSettings:
    """Tests for Settings."""

    @pytest.mark.parametrize(
        ("environment", "secure"),
        [("production", True), ("development", False), ("test", False)],
    )
    def test_secure_cookies(self, environment: str, secure: bool) -> None:
        """Cookies are secure everywhere except test and development."""
        settings = Settings(_env_file=None, environment=environment)  # type: ignore[arg-type]

        assert settings.secure_cookies is secure

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings should come from environment variables."""
        monkeypatch.setenv("JWT_KEY", "from-the-environment")
        monkeypatch.setenv("ENVIRONMENT", "development")

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.jwt_key is not None
        assert settings.jwt_key.get_secret_value() == "from-the-environment"
        assert settings.environment == "development"

    def test_jwt_key_is_not_printed(self) -> None:
        """The signing key should be masked in reprs."""
        settings = Settings(_env_file=None, jwt_key="super-secret-key")  # type: ignore[arg-type]

        assert "super-secret-key" not in repr(settings)

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("JWT_KEY", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.jwt_key is None
        assert settings.environment == "production"
        assert settings.port == 3000
        assert settings.api_prefix == "/api/users"
        assert settings.jwt_expire_hours is None


class TestProductionCookies:
    """Session cookies outside test and development."""

    def test_cookie_is_secure(self, tmp_path: Path) -> None:
        app = create_app(make_settings(tmp_path, environment="production"))

        with TestClient(app, base_url="https://testserver") as client:
            response = client.post(
                "/api/users/signup", json={"email": "a@b.com", "password": "pw12"}
            )

        assert response.status_code == 201
        header = response.headers["set-cookie"].lower()
        assert "secure" in header
        assert "httponly" in header
