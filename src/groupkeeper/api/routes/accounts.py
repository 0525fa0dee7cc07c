"""Account routes."""
from fastapi import APIRouter, status

from groupkeeper.api.deps import CurrentClaims, DatabaseSession, RequireElevated
from groupkeeper.schemas.account import (
    AccountCreate,
    AccountGroupJoin,
    AccountGroupsAdd,
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
)
from groupkeeper.services.account_service import (
    create_account,
    delete_account,
    get_account_by_id,
    list_accounts,
    update_account,
)
from groupkeeper.services.membership_service import (
    accounts_by_group_name,
    add_account_to_group_by_name,
    add_groups_to_account,
)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("", response_model=AccountListResponse)
def list_all_accounts(claims: CurrentClaims, db: DatabaseSession):
    """List all accounts."""
    return AccountListResponse(data=list_accounts(db))


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[RequireElevated],
)
def create_new_account(
    account_data: AccountCreate,
    claims: CurrentClaims,
    db: DatabaseSession,
):
    """
    Create a new account. Elevated accounts only.

    Args:
        account_data: Account creation data
        claims: Caller's token claims
        db: Database session

    Returns:
        Created account
    """
    return create_account(
        db,
        name=account_data.name,
        email=account_data.email,
        password=account_data.password,
        role=account_data.role,
    )


@router.get("/by-group/{group_name}", response_model=AccountListResponse)
def get_accounts_by_group(group_name: str, claims: CurrentClaims, db: DatabaseSession):
    """
    List the members of a group, looked up by group name.

    Args:
        group_name: Group name
        claims: Caller's token claims
        db: Database session

    Returns:
        Member accounts, possibly empty
    """
    return AccountListResponse(data=accounts_by_group_name(db, group_name))


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(account_id: int, claims: CurrentClaims, db: DatabaseSession):
    """Get a specific account."""
    return get_account_by_id(db, account_id)


@router.patch("/{account_id}", response_model=AccountResponse, dependencies=[RequireElevated])
@router.put("/{account_id}", response_model=AccountResponse, dependencies=[RequireElevated])
def update_existing_account(
    account_id: int,
    account_data: AccountUpdate,
    claims: CurrentClaims,
    db: DatabaseSession,
):
    """
    Update an account's name, email, password or role. Elevated accounts only.

    Args:
        account_id: Account ID
        account_data: Account update data
        claims: Caller's token claims
        db: Database session

    Returns:
        Updated account
    """
    updates = account_data.model_dump(exclude_none=True)
    return update_account(db, account_id, updates)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[RequireElevated],
)
def delete_existing_account(account_id: int, claims: CurrentClaims, db: DatabaseSession):
    """Delete an account and release its group memberships. Elevated accounts only."""
    delete_account(db, account_id)


@router.post("/{account_id}/groups", response_model=AccountResponse)
def join_groups(
    account_id: int,
    groups_data: AccountGroupsAdd,
    claims: CurrentClaims,
    db: DatabaseSession,
):
    """
    Add an account to several groups at once.

    Args:
        account_id: Account ID
        groups_data: Group IDs to join
        claims: Caller's token claims
        db: Database session

    Returns:
        Updated account
    """
    return add_groups_to_account(db, account_id, groups_data.group_ids)


@router.post("/{account_id}/groups/by-name", response_model=AccountResponse)
def join_group_by_name(
    account_id: int,
    group_data: AccountGroupJoin,
    claims: CurrentClaims,
    db: DatabaseSession,
):
    """Add an account to one group, looked up by group name."""
    return add_account_to_group_by_name(db, account_id, group_data.name)
