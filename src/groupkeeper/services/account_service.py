"""Account service for registration, login and account maintenance."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from groupkeeper.config import Settings
from groupkeeper.core.errors import DuplicateError, NotFoundError
from groupkeeper.core.security import hash_password, verify_password
from groupkeeper.models import Account, AccountRole
from groupkeeper.repository import Repository
from groupkeeper.services.membership_service import release_account

logger = logging.getLogger(__name__)

# Fields a general update may touch; membership lists are not among them
UPDATABLE_FIELDS = {"name", "email", "password", "role"}


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    criteria = [Account.email == email]
    if exclude_id is not None:
        criteria.append(Account.id != exclude_id)
    return Repository(db, Account).find_one(*criteria, include_deleted=True) is not None


def create_account(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: AccountRole = AccountRole.STANDARD,
) -> Account:
    """
    Create a new account.

    Args:
        db: Database session
        name: Display name
        email: Unique email address
        password: Plaintext password
        role: Account role

    Returns:
        Created account

    Raises:
        DuplicateError: If the email is already registered
    """
    email = email.lower()
    if _email_taken(db, email):
        raise DuplicateError("Account", "email")

    account = Account(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=AccountRole(role).value,
        group_ids=[],
    )
    Repository(db, Account).save(account)
    db.commit()
    db.refresh(account)

    logger.info("Created account %s with role %s", account.id, account.role)
    return account


def authenticate_account(db: Session, email: str, password: str) -> Account | None:
    """
    Check login credentials.

    Returns:
        The account if email and password match, None otherwise
    """
    account = Repository(db, Account).find_one(Account.email == email.lower())
    if account is None:
        return None
    if not verify_password(password, account.hashed_password):
        return None
    return account


def get_account_by_id(db: Session, account_id: int) -> Account:
    """Get an account by ID, raising NotFoundError if absent."""
    account = Repository(db, Account).get(account_id)
    if account is None:
        raise NotFoundError("Account", [account_id])
    return account


def list_accounts(db: Session) -> list[Account]:
    """List all live accounts."""
    return Repository(db, Account).find_many()


def update_account(db: Session, account_id: int, updates: dict[str, Any]) -> Account:
    """
    Update an account's profile fields.

    Only name, email, password and role are applied; anything else in
    ``updates`` is ignored.

    Raises:
        NotFoundError: If the account does not exist
        DuplicateError: If the new email belongs to another account
    """
    account = get_account_by_id(db, account_id)

    for field, value in updates.items():
        if field not in UPDATABLE_FIELDS or value is None:
            continue
        if field == "email":
            value = value.lower()
            if _email_taken(db, value, exclude_id=account.id):
                raise DuplicateError("Account", "email")
            account.email = value
        elif field == "password":
            account.hashed_password = hash_password(value)
        elif field == "role":
            account.role = AccountRole(value).value
        else:
            setattr(account, field, value)

    account.updated_at = datetime.now(UTC)
    Repository(db, Account).save(account)
    db.commit()
    db.refresh(account)
    return account


def delete_account(db: Session, account_id: int) -> Account:
    """
    Soft-delete an account and remove it from every group it belonged to.

    Raises:
        NotFoundError: If the account does not exist
    """
    accounts = Repository(db, Account)
    account = accounts.get(account_id)
    if account is None:
        raise NotFoundError("Account", [account_id])

    released = release_account(db, account)
    accounts.delete_by_id(account.id)
    db.commit()
    db.refresh(account)

    logger.info("Deleted account %s, released from %d groups", account.id, len(released))
    return account


def ensure_bootstrap_account(db: Session, settings: Settings) -> Account | None:
    """Create the configured elevated account if it does not exist yet."""
    if not settings.bootstrap_email or not settings.bootstrap_password:
        return None
    if _email_taken(db, settings.bootstrap_email.lower()):
        return None
    account = create_account(
        db,
        name=settings.bootstrap_name,
        email=settings.bootstrap_email,
        password=settings.bootstrap_password,
        role=AccountRole.ELEVATED,
    )
    logger.info("Bootstrapped elevated account %s", account.email)
    return account
