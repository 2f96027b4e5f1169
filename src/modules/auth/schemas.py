"""Pydantic schemas for authentication API."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.modules.auth.models import Account


class SignupRequest(BaseModel):
    """Validated signup payload (password already trimmed)."""

    email: str
    password: str


class SigninRequest(BaseModel):
    """Validated signin payload (password already trimmed)."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Public projection of an account (excludes sensitive data)."""

    id: UUID
    email: str

    @classmethod
    def from_account(cls, account: Account) -> "UserResponse":
        """Build the public view of an account."""
        return cls(id=account.id, email=account.email)


class CurrentUser(BaseModel):
    """Identity carried by a verified session token."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str


class CurrentUserResponse(BaseModel):
    """Response for the current user lookup."""

    model_config = ConfigDict(populate_by_name=True)

    current_user: CurrentUser | None = Field(default=None, alias="currentUser")


class UserListResponse(BaseModel):
    """Response listing every account's public projection."""

    users: list[UserResponse]


class TokenPayload(BaseModel):
    """Schema for session token claims."""

    id: UUID
    email: str
    iat: int | None = None  # Issued at (epoch seconds)
    exp: int | None = None  # Only present when expiry is configured
