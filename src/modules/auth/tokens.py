"""Session token issuing and verification."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
import structlog
from pydantic import ValidationError

from src.modules.auth.exceptions import ConfigurationError
from src.modules.auth.schemas import TokenPayload

logger = structlog.get_logger()


class SessionTokenIssuer:
    """Signs and verifies session tokens.

    Tokens are signed JWTs carrying the account id and email. They are not
    encrypted and the server keeps no record of them, so a token stays
    valid until it expires (if expiry is configured) or the key changes.
    """

    def __init__(
        self,
        secret: str | None,
        *,
        algorithm: str = "HS256",
        expire_hours: int | None = None,
    ) -> None:
        """Initialize the issuer.

        Args:
            secret: Signing key.
            algorithm: JWT signing algorithm.
            expire_hours: Token lifetime in hours, or None for no expiry.

        Raises:
            ConfigurationError: If no signing key is provided.
        """
        if not secret:
            raise ConfigurationError("JWT_KEY must be defined")

        self._secret = secret
        self._algorithm = algorithm
        self._expire_hours = expire_hours

    def issue(self, account_id: UUID, email: str) -> str:
        """Create a signed token for an account.

        Args:
            account_id: The account's UUID.
            email: The account's email.

        Returns:
            Encoded JWT.
        """
        now = datetime.now(UTC)

        # JWT requires integer timestamps for exp and iat
        payload: dict[str, object] = {
            "id": str(account_id),
            "email": email,
            "iat": int(now.timestamp()),
        }
        if self._expire_hours is not None:
            expires = now + timedelta(hours=self._expire_hours)
            payload["exp"] = int(expires.timestamp())

        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenPayload | None:
        """Verify a token's signature and decode its claims.

        Args:
            token: Encoded JWT.

        Returns:
            Decoded claims, or None if the token is invalid for any reason.
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("token_expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.info("token_invalid", error=str(e))
            return None

        try:
            return TokenPayload.model_validate(claims)
        except ValidationError:
            logger.info("token_claims_invalid")
            return None
