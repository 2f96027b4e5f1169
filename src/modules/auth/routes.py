"""Credential flow API routes."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import (
    get_auth_service,
    get_current_user,
    get_session_carrier,
    require_auth,
    signin_payload,
    signup_payload,
)
from src.api.errors import BadRequestError
from src.modules.auth.exceptions import AuthenticationError, DuplicateAccountError
from src.modules.auth.schemas import (
    CurrentUser,
    CurrentUserResponse,
    SigninRequest,
    SignupRequest,
    UserListResponse,
    UserResponse,
)
from src.modules.auth.service import AuthService
from src.modules.auth.session import SessionCarrier

logger = structlog.get_logger()

router = APIRouter(tags=["authentication"])

# Duplicate emails get a generic message so signup cannot be used to probe
# which addresses are registered
SIGNUP_REJECTED_MESSAGE = "Unable to create account"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


@router.post(
    "/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def signup(
    data: Annotated[SignupRequest, Depends(signup_payload)],
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    carrier: Annotated[SessionCarrier, Depends(get_session_carrier)],
) -> UserResponse:
    """Create an account and sign it in."""
    try:
        grant = await auth_service.signup(data.email, data.password)
    except DuplicateAccountError as e:
        logger.info("signup_rejected", reason="duplicate_email")
        raise BadRequestError(SIGNUP_REJECTED_MESSAGE) from e

    carrier.attach(response, grant.token)
    return UserResponse.from_account(grant.account)


@router.post(
    "/signin",
    response_model=UserResponse,
    summary="Sign in with email and password",
)
async def signin(
    data: Annotated[SigninRequest, Depends(signin_payload)],
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    carrier: Annotated[SessionCarrier, Depends(get_session_carrier)],
) -> UserResponse:
    """Verify credentials and set the session cookie."""
    try:
        grant = await auth_service.signin(data.email, data.password)
    except AuthenticationError as e:
        raise BadRequestError(INVALID_CREDENTIALS_MESSAGE) from e

    carrier.attach(response, grant.token)
    return UserResponse.from_account(grant.account)


@router.post("/signout", summary="Clear the session cookie")
async def signout(
    carrier: Annotated[SessionCarrier, Depends(get_session_carrier)],
) -> Response:
    """Overwrite the session cookie, whether or not one was sent."""
    response = Response(status_code=status.HTTP_200_OK)
    carrier.detach(response)
    return response


@router.get(
    "/currentuser",
    response_model=CurrentUserResponse,
    summary="Identity behind the session cookie",
)
async def current_user(
    user: Annotated[CurrentUser | None, Depends(get_current_user)],
) -> CurrentUserResponse:
    """Return the signed-in identity, or null."""
    return CurrentUserResponse(current_user=user)


@router.get(
    "/",
    response_model=UserListResponse,
    summary="List all accounts",
)
async def list_users(
    _user: Annotated[CurrentUser, Depends(require_auth)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserListResponse:
    """List every account's public view. Requires a session."""
    accounts = await auth_service.list_users()
    return UserListResponse(users=[UserResponse.from_account(a) for a in accounts])
