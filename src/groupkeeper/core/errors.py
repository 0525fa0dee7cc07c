"""Error taxonomy shared by the authorization gate and the membership engine.

Every error carries the HTTP status it maps to, so the API layer can turn any
of them into a response with a single exception handler.
"""

from collections.abc import Iterable

from fastapi import status


class GroupkeeperError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class UnauthorizedError(GroupkeeperError):
    """Missing or unverifiable credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authorized"


class ForbiddenError(GroupkeeperError):
    """Valid credential with an insufficient role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = (
        "You do not have the authorization and permissions to access this resource."
    )


class NotFoundError(GroupkeeperError):
    """A referenced account or group does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, missing: Iterable[object] = ()):
        self.entity = entity
        self.missing = list(missing)
        detail = f"{entity} not found"
        if self.missing:
            detail += f": {', '.join(str(key) for key in self.missing)}"
        super().__init__(detail)


class DuplicateError(GroupkeeperError):
    """A unique field value is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, entity: str, field: str):
        self.entity = entity
        self.field = field
        super().__init__(f"{entity} with this {field} already exists")


class AlreadyMemberError(GroupkeeperError):
    """The account/group edge already exists."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, account_id: int, group_id: int):
        self.account_id = account_id
        self.group_id = group_id
        super().__init__(f"Account {account_id} is already a member of group {group_id}")


class NotMemberError(GroupkeeperError):
    """The account/group edge does not exist."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, account_id: int, group_id: int):
        self.account_id = account_id
        self.group_id = group_id
        super().__init__(f"Account {account_id} is not a member of group {group_id}")


class InternalError(GroupkeeperError):
    """Unexpected signing or persistence failure."""


class MembershipWriteError(InternalError):
    """Persisting one side of a membership edge failed; both sides were rolled back."""

    def __init__(self, account_ids: Iterable[int], group_ids: Iterable[int]):
        self.account_ids = list(account_ids)
        self.group_ids = list(group_ids)
        super().__init__(
            f"Failed to persist membership of accounts {self.account_ids} "
            f"in groups {self.group_ids}"
        )


class TokenError(Exception):
    """Base class for bearer token verification failures."""


class TokenExpiredError(TokenError):
    """The token signature is valid but its expiry is in the past."""


class TokenInvalidError(TokenError):
    """The token signature, structure or claims are invalid."""
