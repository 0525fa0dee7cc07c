"""Database models."""
from groupkeeper.models.account import Account, AccountRole
from groupkeeper.models.group import Group

__all__ = [
    "Account",
    "AccountRole",
    "Group",
]
