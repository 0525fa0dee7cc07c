"""Pydantic schemas for request/response validation."""
from groupkeeper.schemas.account import (
    AccountCreate,
    AccountGroupJoin,
    AccountGroupsAdd,
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    ClaimsResponse,
    LoginRequest,
    TokenResponse,
)
from groupkeeper.schemas.group import (
    GroupCreate,
    GroupListResponse,
    GroupMemberAdd,
    GroupMembersAdd,
    GroupResponse,
    GroupUpdate,
)

__all__ = [
    # Account schemas
    "AccountCreate",
    "AccountUpdate",
    "AccountResponse",
    "AccountListResponse",
    "AccountGroupsAdd",
    "AccountGroupJoin",
    "LoginRequest",
    "TokenResponse",
    "ClaimsResponse",
    # Group schemas
    "GroupCreate",
    "GroupUpdate",
    "GroupResponse",
    "GroupListResponse",
    "GroupMemberAdd",
    "GroupMembersAdd",
]
