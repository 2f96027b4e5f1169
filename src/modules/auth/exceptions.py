"""Authentication domain exceptions."""


class AuthError(Exception):
    """Base exception for authentication operations."""

    pass


class DuplicateAccountError(AuthError):
    """Raised when an account with the same email already exists."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Account already exists: {email}")


class AccountNotFoundError(AuthError):
    """Raised when an account is not found."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Account not found: {identifier}")


class AuthenticationError(AuthError):
    """Raised when credentials do not match an account."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class ConfigurationError(AuthError):
    """Raised when required authentication settings are missing."""
