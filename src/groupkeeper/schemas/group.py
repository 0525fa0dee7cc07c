"""Group Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class GroupBase(BaseModel):
    """Base group schema."""

    name: str = Field(..., min_length=1, max_length=100, description="Group name")


class GroupCreate(GroupBase):
    """Schema for creating a group."""

    pass


class GroupUpdate(BaseModel):
    """Schema for updating a group."""

    name: str | None = Field(None, min_length=1, max_length=100)


class GroupResponse(GroupBase):
    """Schema for group response."""

    id: int
    member_ids: list[int]
    inserted_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GroupListResponse(BaseModel):
    """Schema for group list response."""

    data: list[GroupResponse]


class GroupMemberAdd(BaseModel):
    """Schema for adding an account to a group by account name."""

    name: str = Field(..., min_length=1, max_length=100, description="Account name to add")


class GroupMembersAdd(BaseModel):
    """Schema for adding several accounts to a group."""

    account_ids: list[int] = Field(..., min_length=1, description="Account IDs to add")
