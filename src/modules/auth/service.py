"""Authentication service: signup, signin and account listing."""

import asyncio
from dataclasses import dataclass

import structlog

from src.infrastructure.observability import traced
from src.modules.auth.exceptions import AuthenticationError
from src.modules.auth.models import Account
from src.modules.auth.password import BCRYPT_ROUNDS, hash_password, verify_password
from src.modules.auth.repository import UserRepository
from src.modules.auth.tokens import SessionTokenIssuer

logger = structlog.get_logger()


@dataclass(frozen=True)
class SessionGrant:
    """An account together with the session token issued for it."""

    account: Account
    token: str


class AuthService:
    """Service for the credential flows.

    Orchestrates the repository, password hashing and token issuing. The
    transport (cookies, status codes) is left to the routes.
    """

    def __init__(
        self,
        repository: UserRepository,
        issuer: SessionTokenIssuer,
        *,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        """Initialize the auth service.

        Args:
            repository: Account repository.
            issuer: Session token issuer.
            bcrypt_rounds: Cost of the dummy hash used for unknown emails.
        """
        self._repo = repository
        self._issuer = issuer
        # Checked against when the email is unknown so signin timing does
        # not reveal which accounts exist
        self._dummy_hash = hash_password("gatekeeper-timing-dummy", rounds=bcrypt_rounds)

    @traced(span_name="auth.signup")
    async def signup(self, email: str, password: str) -> SessionGrant:
        """Register an account and open a session for it.

        Args:
            email: Validated email address.
            password: Validated, trimmed plain text password.

        Returns:
            The new account and its session token.

        Raises:
            DuplicateAccountError: If the email is already registered.
        """
        account = await self._repo.create(email, password)
        token = self._issuer.issue(account.id, account.email)

        logger.info("user_signed_up", user_id=str(account.id))
        return SessionGrant(account=account, token=token)

    @traced(span_name="auth.signin")
    async def signin(self, email: str, password: str) -> SessionGrant:
        """Check credentials and open a session.

        Args:
            email: Validated email address.
            password: Trimmed plain text password.

        Returns:
            The account and its session token.

        Raises:
            AuthenticationError: If the email is unknown or the password
                is wrong. Both cases raise the same error.
        """
        account = await self._repo.get_by_email(email, include_secret=True)

        if account is None:
            await asyncio.to_thread(verify_password, password, self._dummy_hash)
            logger.warning("signin_failed", reason="unknown_email")
            raise AuthenticationError()

        if not await asyncio.to_thread(verify_password, password, account.password_hash):
            logger.warning("signin_failed", reason="bad_password", user_id=str(account.id))
            raise AuthenticationError()

        token = self._issuer.issue(account.id, account.email)

        logger.info("user_signed_in", user_id=str(account.id))
        return SessionGrant(account=account, token=token)

    @traced(span_name="auth.list_users")
    async def list_users(self) -> list[Account]:
        """List every account, without secrets."""
        return await self._repo.list_all()
