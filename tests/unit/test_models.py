"""Unit tests for database models and the repository."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from groupkeeper.models import Account, AccountRole, Group
from groupkeeper.repository import Repository


def test_account_model(db_session: Session):
    """Test Account model creation."""
    account = Account(
        name="alice",
        email="alice@example.com",
        hashed_password="hashed_password",
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)

    assert account.id is not None
    assert account.role == AccountRole.STANDARD.value
    assert account.group_ids == []
    assert account.deleted_at is None
    assert account.inserted_at is not None
    assert account.updated_at is not None


def test_group_model(db_session: Session):
    """Test Group model creation."""
    group = Group(name="Test Group")
    db_session.add(group)
    db_session.commit()
    db_session.refresh(group)

    assert group.id is not None
    assert group.name == "Test Group"
    assert group.member_ids == []
    assert group.inserted_at is not None


def test_repository_crud(db_session: Session):
    """Repository saves, finds and soft-deletes records."""
    groups = Repository(db_session, Group)
    first = groups.save(Group(name="G1", member_ids=[]))
    groups.save(Group(name="G2", member_ids=[]))
    db_session.commit()

    assert groups.get(first.id) is first
    assert groups.find_one(Group.name == "G2").name == "G2"
    assert [group.name for group in groups.find_many()] == ["G1", "G2"]

    deleted = groups.delete_by_id(first.id)
    db_session.commit()

    assert deleted.deleted_at is not None
    assert groups.get(first.id) is None
    assert groups.find_one(Group.name == "G1") is None
    assert groups.find_one(Group.name == "G1", include_deleted=True) is first
    assert [group.name for group in groups.find_many()] == ["G2"]
    assert groups.delete_by_id(first.id) is None


def test_version_bumps_on_update(db_session: Session):
    group = Group(name="G1")
    db_session.add(group)
    db_session.commit()
    assert group.version == 1

    group.member_ids = [1]
    db_session.commit()
    assert group.version == 2


def test_account_role_is_constrained(db_session: Session):
    db_session.add(
        Account(name="mallory", email="m@example.com", hashed_password="x", role="root")
    )
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()
