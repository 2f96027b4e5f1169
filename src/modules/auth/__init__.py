"""Authentication module: accounts, credentials and session tokens."""

from src.modules.auth.exceptions import (
    AccountNotFoundError,
    AuthenticationError,
    AuthError,
    ConfigurationError,
    DuplicateAccountError,
)
from src.modules.auth.models import Account
from src.modules.auth.password import hash_password, verify_password
from src.modules.auth.repository import UserRepository
from src.modules.auth.schemas import (
    CurrentUser,
    CurrentUserResponse,
    SigninRequest,
    SignupRequest,
    TokenPayload,
    UserListResponse,
    UserResponse,
)
from src.modules.auth.service import AuthService, SessionGrant
from src.modules.auth.session import SessionCarrier
from src.modules.auth.tokens import SessionTokenIssuer

__all__ = [
    "Account",
    "AccountNotFoundError",
    "AuthError",
    "AuthService",
    "AuthenticationError",
    "ConfigurationError",
    "CurrentUser",
    "CurrentUserResponse",
    "DuplicateAccountError",
    "SessionCarrier",
    "SessionGrant",
    "SessionTokenIssuer",
    "SigninRequest",
    "SignupRequest",
    "TokenPayload",
    "UserListResponse",
    "UserRepository",
    "UserResponse",
    "hash_password",
    "verify_password",
]
