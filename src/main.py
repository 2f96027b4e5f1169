"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from src.api.errors import register_exception_handlers
from src.config import Settings, get_settings
from src.infrastructure.database import init_database
from src.infrastructure.observability import init_observability, shutdown_observability
from src.modules.auth.repository import UserRepository
from src.modules.auth.routes import router as auth_router
from src.modules.auth.service import AuthService
from src.modules.auth.session import SessionCarrier
from src.modules.auth.tokens import SessionTokenIssuer

logger = structlog.get_logger()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    The signing key is checked when the app starts up, before it serves
    any request; a missing ``JWT_KEY`` aborts startup with
    ``ConfigurationError``.

    Args:
        settings: Settings to use, defaults to the environment.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Application lifespan handler for startup/shutdown."""
        jwt_key = settings.jwt_key.get_secret_value() if settings.jwt_key else None
        issuer = SessionTokenIssuer(
            jwt_key,
            algorithm=settings.jwt_algorithm,
            expire_hours=settings.jwt_expire_hours,
        )

        database = await init_database(settings.database_path)
        repository = UserRepository(database, bcrypt_rounds=settings.bcrypt_rounds)

        app.state.token_issuer = issuer
        app.state.session_carrier = SessionCarrier(
            settings.session_cookie_name, secure=settings.secure_cookies
        )
        app.state.auth_service = AuthService(
            repository, issuer, bcrypt_rounds=settings.bcrypt_rounds
        )
        logger.info(
            "auth_service_initialized",
            environment=settings.environment,
            secure_cookies=settings.secure_cookies,
        )

        try:
            yield
        finally:
            await database.disconnect()
            shutdown_observability()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    init_observability(
        settings.app_name,
        settings.app_version,
        log_level=settings.log_level,
        json_logs=settings.log_json,
        tracing_enabled=settings.tracing_enabled,
        otlp_endpoint=settings.otlp_endpoint,
        console_export=settings.trace_console_export,
        sample_rate=settings.trace_sample_rate,
        app=app,
    )

    register_exception_handlers(app)
    app.include_router(auth_router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(app, host=_settings.host, port=_settings.port)
