"""Group service for creating and maintaining groups."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from groupkeeper.core.errors import DuplicateError, NotFoundError
from groupkeeper.models import Group
from groupkeeper.repository import Repository
from groupkeeper.services.membership_service import release_group

logger = logging.getLogger(__name__)


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    criteria = [Group.name == name]
    if exclude_id is not None:
        criteria.append(Group.id != exclude_id)
    return Repository(db, Group).find_one(*criteria, include_deleted=True) is not None


def create_group(db: Session, name: str) -> Group:
    """
    Create a new, empty group.

    Args:
        db: Database session
        name: Group name

    Returns:
        Created group

    Raises:
        DuplicateError: If the group name already exists
    """
    if _name_taken(db, name):
        raise DuplicateError("Group", "name")

    group = Group(name=name, member_ids=[])
    Repository(db, Group).save(group)
    db.commit()
    db.refresh(group)

    logger.info("Created group %s", group.id)
    return group


def get_group_by_id(db: Session, group_id: int) -> Group:
    """Get a group by ID, raising NotFoundError if absent."""
    group = Repository(db, Group).get(group_id)
    if group is None:
        raise NotFoundError("Group", [group_id])
    return group


def list_groups(db: Session) -> list[Group]:
    """List all live groups."""
    return Repository(db, Group).find_many()


def update_group(db: Session, group_id: int, updates: dict[str, Any]) -> Group:
    """
    Rename a group. Member lists are not updatable here.

    Raises:
        NotFoundError: If the group does not exist
        DuplicateError: If the new name is already taken
    """
    group = get_group_by_id(db, group_id)

    name = updates.get("name")
    if name is not None and name != group.name:
        if _name_taken(db, name, exclude_id=group.id):
            raise DuplicateError("Group", "name")
        group.name = name

    group.updated_at = datetime.now(UTC)
    Repository(db, Group).save(group)
    db.commit()
    db.refresh(group)
    return group


def delete_group(db: Session, group_id: int) -> Group:
    """
    Soft-delete a group and remove it from every member account.

    Raises:
        NotFoundError: If the group does not exist
    """
    groups = Repository(db, Group)
    group = groups.get(group_id)
    if group is None:
        raise NotFoundError("Group", [group_id])

    released = release_group(db, group)
    groups.delete_by_id(group.id)
    db.commit()
    db.refresh(group)

    logger.info("Deleted group %s, released %d members", group.id, len(released))
    return group
