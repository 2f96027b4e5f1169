"""Request dependencies for services, identity and authorization."""

from typing import Annotated

import structlog
from fastapi import Depends, Request

from src.api.errors import NotAuthorizedError
from src.api.validation import (
    SIGNIN_VALIDATOR,
    SIGNUP_VALIDATOR,
    read_json_body,
)
from src.modules.auth.schemas import CurrentUser, SigninRequest, SignupRequest
from src.modules.auth.service import AuthService
from src.modules.auth.session import SessionCarrier
from src.modules.auth.tokens import SessionTokenIssuer

logger = structlog.get_logger()


def get_auth_service(request: Request) -> AuthService:
    """Get the auth service configured at startup."""
    service: AuthService = request.app.state.auth_service
    return service


def get_session_carrier(request: Request) -> SessionCarrier:
    """Get the session cookie carrier configured at startup."""
    carrier: SessionCarrier = request.app.state.session_carrier
    return carrier


def get_token_issuer(request: Request) -> SessionTokenIssuer:
    """Get the session token issuer configured at startup."""
    issuer: SessionTokenIssuer = request.app.state.token_issuer
    return issuer


def get_current_user(
    request: Request,
    carrier: Annotated[SessionCarrier, Depends(get_session_carrier)],
    issuer: Annotated[SessionTokenIssuer, Depends(get_token_issuer)],
) -> CurrentUser | None:
    """Resolve the identity behind the request's session cookie.

    Never rejects the request: a missing, malformed or forged session all
    resolve to None.

    Returns:
        The authenticated identity, or None.
    """
    token = carrier.read(request)
    if token is None:
        return None

    payload = issuer.verify(token)
    if payload is None:
        logger.debug("session_ignored", path=request.url.path)
        return None

    return CurrentUser(id=payload.id, email=payload.email)


def require_auth(
    user: Annotated[CurrentUser | None, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency that requires an authenticated identity.

    Raises:
        NotAuthorizedError: If the request carries no valid session.
    """
    if user is None:
        raise NotAuthorizedError()
    return user


async def signup_payload(request: Request) -> SignupRequest:
    """Validated signup body."""
    data = SIGNUP_VALIDATOR.validate(await read_json_body(request))
    return SignupRequest(**data)


async def signin_payload(request: Request) -> SigninRequest:
    """Validated signin body."""
    data = SIGNIN_VALIDATOR.validate(await read_json_body(request))
    return SigninRequest(**data)
