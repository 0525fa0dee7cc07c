"""Membership consistency engine.

Every edge between an account and a group is stored twice: the group id in
``Account.group_ids`` and the account id in ``Group.member_ids``. The
functions here are the only writers of those lists. Each operation writes
the account side first and the group side second inside one session
transaction; if any write fails, both sides are rolled back and
``MembershipWriteError`` is raised, so a half-applied edge is never
committed.

Both models carry a version column, so a write based on a stale read of
either list fails the flush instead of overwriting a concurrent change.
"""

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from groupkeeper.core.errors import (
    AlreadyMemberError,
    MembershipWriteError,
    NotFoundError,
    NotMemberError,
)
from groupkeeper.models import Account, Group
from groupkeeper.repository import Repository

logger = logging.getLogger(__name__)


def _with_id(ids: Sequence[int], new_id: int) -> list[int]:
    if new_id in ids:
        return list(ids)
    return [*ids, new_id]


def _without_id(ids: Sequence[int], old_id: int) -> list[int]:
    return [existing for existing in ids if existing != old_id]


def _persist_edges(db: Session, accounts: Iterable[Account], groups: Iterable[Group]) -> None:
    """Write the accounts, then each group, then commit as one unit."""
    accounts = list(accounts)
    groups = list(groups)
    account_ids = [account.id for account in accounts]
    group_ids = [group.id for group in groups]
    context = {"account_ids": account_ids, "group_ids": group_ids}
    try:
        account_repo = Repository(db, Account)
        for account in accounts:
            account_repo.save(account)
        group_repo = Repository(db, Group)
        for group in groups:
            group_repo.save(group)
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        logger.warning(
            "Concurrent membership change for accounts %s and groups %s; rolled back",
            account_ids,
            group_ids,
            extra=context,
        )
        raise MembershipWriteError(account_ids, group_ids) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            "Membership write failed for accounts %s and groups %s; rolled back",
            account_ids,
            group_ids,
            exc_info=True,
            extra=context,
        )
        raise MembershipWriteError(account_ids, group_ids) from exc


def add_member(db: Session, group_id: int, account_name: str) -> Group:
    """
    Add the named account to a group.

    Args:
        db: Database session
        group_id: Group ID
        account_name: Name of the account to add

    Returns:
        Updated group

    Raises:
        NotFoundError: If the account or group does not exist
        AlreadyMemberError: If the edge already exists on either side
        MembershipWriteError: If persisting either side fails
    """
    account = Repository(db, Account).find_one(Account.name == account_name)
    if account is None:
        raise NotFoundError("Account", [account_name])

    group = Repository(db, Group).get(group_id)
    if group is None:
        raise NotFoundError("Group", [group_id])

    if account.id in group.member_ids or group.id in account.group_ids:
        raise AlreadyMemberError(account.id, group.id)

    account.group_ids = _with_id(account.group_ids, group.id)
    group.member_ids = _with_id(group.member_ids, account.id)
    _persist_edges(db, [account], [group])

    logger.info(
        "Added account %s to group %s",
        account.id,
        group.id,
        extra={"account_ids": [account.id], "group_ids": [group.id]},
    )
    db.refresh(group)
    return group


def remove_member(db: Session, group_id: int, account_id: int) -> Group:
    """
    Remove an account from a group.

    An edge recorded on only one side still counts as present; removing it
    clears both sides.

    Raises:
        NotFoundError: If the account or group does not exist
        NotMemberError: If neither side records the edge
        MembershipWriteError: If persisting either side fails
    """
    account = Repository(db, Account).get(account_id)
    if account is None:
        raise NotFoundError("Account", [account_id])

    group = Repository(db, Group).get(group_id)
    if group is None:
        raise NotFoundError("Group", [group_id])

    if account.id not in group.member_ids and group.id not in account.group_ids:
        raise NotMemberError(account.id, group.id)

    account.group_ids = _without_id(account.group_ids, group.id)
    group.member_ids = _without_id(group.member_ids, account.id)
    _persist_edges(db, [account], [group])

    logger.info(
        "Removed account %s from group %s",
        account.id,
        group.id,
        extra={"account_ids": [account.id], "group_ids": [group.id]},
    )
    db.refresh(group)
    return group


def add_groups_to_account(db: Session, account_id: int, group_ids: Sequence[int]) -> Account:
    """
    Add an account to several groups at once.

    The batch is all-or-nothing: if any requested group is missing, nothing
    changes. Repeated ids and edges that already exist are tolerated.

    Args:
        db: Database session
        account_id: Account ID
        group_ids: IDs of the groups to join

    Returns:
        Updated account

    Raises:
        NotFoundError: If the account or any requested group does not exist
        MembershipWriteError: If persisting any record fails
    """
    account = Repository(db, Account).get(account_id)
    if account is None:
        raise NotFoundError("Account", [account_id])

    requested = list(dict.fromkeys(group_ids))
    groups = Repository(db, Group).find_many(Group.id.in_(requested)) if requested else []
    if len(groups) != len(requested):
        found = {group.id for group in groups}
        raise NotFoundError("Group", [gid for gid in requested if gid not in found])

    merged = list(account.group_ids)
    for gid in requested:
        merged = _with_id(merged, gid)
    account.group_ids = merged

    changed_groups = []
    for group in groups:
        if account.id not in group.member_ids:
            group.member_ids = _with_id(group.member_ids, account.id)
            changed_groups.append(group)

    _persist_edges(db, [account], changed_groups)

    logger.info("Added account %s to groups %s", account.id, requested)
    db.refresh(account)
    return account


def add_account_to_group_by_name(db: Session, account_id: int, group_name: str) -> Account:
    """
    Add an account to the group with the given name.

    Raises:
        NotFoundError: If the account or group does not exist
        AlreadyMemberError: If the edge already exists on either side
        MembershipWriteError: If persisting either side fails
    """
    account = Repository(db, Account).get(account_id)
    if account is None:
        raise NotFoundError("Account", [account_id])

    group = Repository(db, Group).find_one(Group.name == group_name)
    if group is None:
        raise NotFoundError("Group", [group_name])

    if account.id in group.member_ids or group.id in account.group_ids:
        raise AlreadyMemberError(account.id, group.id)

    account.group_ids = _with_id(account.group_ids, group.id)
    group.member_ids = _with_id(group.member_ids, account.id)
    _persist_edges(db, [account], [group])

    logger.info("Added account %s to group %s", account.id, group.name)
    db.refresh(account)
    return account


def add_accounts_to_group(db: Session, group_id: int, account_ids: Sequence[int]) -> Group:
    """
    Add several accounts to one group.

    Mirrors add_groups_to_account from the group side: all-or-nothing on
    missing accounts, tolerant of repeats and existing edges.

    Raises:
        NotFoundError: If the group or any requested account does not exist
        MembershipWriteError: If persisting any record fails
    """
    group = Repository(db, Group).get(group_id)
    if group is None:
        raise NotFoundError("Group", [group_id])

    requested = list(dict.fromkeys(account_ids))
    accounts = (
        Repository(db, Account).find_many(Account.id.in_(requested)) if requested else []
    )
    if len(accounts) != len(requested):
        found = {account.id for account in accounts}
        raise NotFoundError("Account", [aid for aid in requested if aid not in found])

    merged = list(group.member_ids)
    for aid in requested:
        merged = _with_id(merged, aid)
    group.member_ids = merged

    changed_accounts = []
    for account in accounts:
        if group.id not in account.group_ids:
            account.group_ids = _with_id(account.group_ids, group.id)
            changed_accounts.append(account)

    _persist_edges(db, changed_accounts, [group])

    logger.info(
        "Added accounts %s to group %s",
        requested,
        group.id,
        extra={"account_ids": requested, "group_ids": [group.id]},
    )
    db.refresh(group)
    return group


def release_account(db: Session, account: Account) -> list[Group]:
    """Drop a departing account from every group that lists it. Does not commit."""
    groups = Repository(db, Group).find_many(Group.id.in_(account.group_ids))
    for group in groups:
        group.member_ids = _without_id(group.member_ids, account.id)
    account.group_ids = []
    return groups


def release_group(db: Session, group: Group) -> list[Account]:
    """Drop a departing group from every member account. Does not commit."""
    accounts = Repository(db, Account).find_many(Account.id.in_(group.member_ids))
    for account in accounts:
        account.group_ids = _without_id(account.group_ids, group.id)
    group.member_ids = []
    return accounts


def groups_by_account_name(db: Session, account_name: str) -> list[Group]:
    """
    List the groups of the named account.

    Raises:
        NotFoundError: If no account has this name
    """
    account = Repository(db, Account).find_one(Account.name == account_name)
    if account is None:
        raise NotFoundError("Account", [account_name])
    if not account.group_ids:
        return []
    return Repository(db, Group).find_many(Group.id.in_(account.group_ids))


def accounts_by_group_name(db: Session, group_name: str) -> list[Account]:
    """
    List the member accounts of the named group.

    Raises:
        NotFoundError: If no group has this name
    """
    group = Repository(db, Group).find_one(Group.name == group_name)
    if group is None:
        raise NotFoundError("Group", [group_name])
    if not group.member_ids:
        return []
    return Repository(db, Account).find_many(Account.id.in_(group.member_ids))
