"""Group routes."""
from fastapi import APIRouter, status

from groupkeeper.api.deps import CurrentClaims, DatabaseSession, RequireElevated
from groupkeeper.schemas.group import (
    GroupCreate,
    GroupListResponse,
    GroupMemberAdd,
    GroupMembersAdd,
    GroupResponse,
    GroupUpdate,
)
from groupkeeper.services.group_service import (
    create_group,
    delete_group,
    get_group_by_id,
    list_groups,
    update_group,
)
from groupkeeper.services.membership_service import (
    add_accounts_to_group,
    add_member,
    groups_by_account_name,
    remove_member,
)

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=GroupListResponse)
def list_all_groups(claims: CurrentClaims, db: DatabaseSession):
    """
    List all groups.

    Args:
        claims: Caller's token claims
        db: Database session

    Returns:
        List of groups
    """
    return GroupListResponse(data=list_groups(db))


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
def create_new_group(group_data: GroupCreate, claims: CurrentClaims, db: DatabaseSession):
    """
    Create a new group.

    Args:
        group_data: Group creation data
        claims: Caller's token claims
        db: Database session

    Returns:
        Created group
    """
    return create_group(db, name=group_data.name)


@router.get("/by-account/{account_name}", response_model=GroupListResponse)
def get_groups_by_account(account_name: str, claims: CurrentClaims, db: DatabaseSession):
    """List the groups an account belongs to, looked up by account name."""
    return GroupListResponse(data=groups_by_account_name(db, account_name))


@router.get("/{group_id}", response_model=GroupResponse)
def get_group(group_id: int, claims: CurrentClaims, db: DatabaseSession):
    """Get a specific group."""
    return get_group_by_id(db, group_id)


@router.patch("/{group_id}", response_model=GroupResponse)
@router.put("/{group_id}", response_model=GroupResponse)
def update_existing_group(
    group_id: int,
    group_data: GroupUpdate,
    claims: CurrentClaims,
    db: DatabaseSession,
):
    """
    Rename a group.

    Args:
        group_id: Group ID
        group_data: Group update data
        claims: Caller's token claims
        db: Database session

    Returns:
        Updated group
    """
    updates = group_data.model_dump(exclude_none=True)
    return update_group(db, group_id, updates)


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[RequireElevated],
)
def delete_existing_group(group_id: int, claims: CurrentClaims, db: DatabaseSession):
    """Delete a group and release its members. Elevated accounts only."""
    delete_group(db, group_id)


@router.post("/{group_id}/members", response_model=GroupResponse)
def add_group_member(
    group_id: int,
    member_data: GroupMemberAdd,
    claims: CurrentClaims,
    db: DatabaseSession,
):
    """
    Add an account to a group by account name.

    Args:
        group_id: Group ID
        member_data: Name of the account to add
        claims: Caller's token claims
        db: Database session

    Returns:
        Updated group
    """
    return add_member(db, group_id, member_data.name)


@router.post("/{group_id}/members/bulk", response_model=GroupResponse)
def add_group_members(
    group_id: int,
    members_data: GroupMembersAdd,
    claims: CurrentClaims,
    db: DatabaseSession,
):
    """Add several accounts to a group at once, by account id."""
    return add_accounts_to_group(db, group_id, members_data.account_ids)


@router.delete("/{group_id}/members/{account_id}", response_model=GroupResponse)
def remove_group_member(
    group_id: int,
    account_id: int,
    claims: CurrentClaims,
    db: DatabaseSession,
):
    """
    Remove an account from a group.

    Args:
        group_id: Group ID
        account_id: Account ID
        claims: Caller's token claims
        db: Database session

    Returns:
        Updated group
    """
    return remove_member(db, group_id, account_id)
