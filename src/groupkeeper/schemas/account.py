"""Account Pydantic schemas."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from groupkeeper.config import EMAIL_PATTERN
from groupkeeper.models.account import AccountRole


class AccountBase(BaseModel):
    """Base account schema."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="Email address")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class AccountCreate(AccountBase):
    """Schema for creating an account."""

    password: str = Field(
        ..., min_length=12, max_length=72, description="Password (12-72 characters)"
    )
    role: AccountRole = Field(default=AccountRole.STANDARD, description="Account role")


class AccountUpdate(BaseModel):
    """Schema for updating an account. Group membership is not updatable here."""

    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    password: str | None = Field(None, min_length=12, max_length=72)
    role: AccountRole | None = None


class AccountResponse(BaseModel):
    """Schema for account response. Stored values are rendered as-is."""

    id: int
    name: str
    email: str
    role: AccountRole
    group_ids: list[int]
    inserted_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountListResponse(BaseModel):
    """Schema for account list response."""

    data: list[AccountResponse]


class AccountGroupsAdd(BaseModel):
    """Schema for adding an account to several groups."""

    group_ids: list[int] = Field(..., min_length=1, description="Group IDs to join")


class AccountGroupJoin(BaseModel):
    """Schema for joining a group by its name."""

    name: str = Field(..., min_length=1, max_length=100, description="Group name to join")


class LoginRequest(BaseModel):
    """Schema for login."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """Schema for token response."""

    email: str
    access_token: str
    token_type: str = "bearer"


class ClaimsResponse(BaseModel):
    """Schema for the claims of the current token."""

    email: str
    role: AccountRole
    issued_at: int
    expires_at: int

    model_config = {"from_attributes": True}
