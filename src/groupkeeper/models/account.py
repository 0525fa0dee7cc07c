"""Account model."""
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import JSON, CheckConstraint, String, func
from sqlalchemy.orm import Mapped, mapped_column

from groupkeeper.database import Base


class AccountRole(str, Enum):
    """Account role enum."""

    STANDARD = "standard"
    ELEVATED = "elevated"


class Account(Base):
    """Account model for authentication, authorization and group membership."""

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("role IN ('standard', 'elevated')", name="check_account_role"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccountRole.STANDARD.value
    )
    # Ids of groups this account belongs to; mirrored by Group.member_ids
    group_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True, default=None)
    inserted_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
    # Bumped on every UPDATE; a stale version aborts the flush
    version: Mapped[int] = mapped_column(nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email={self.email}, role={self.role})>"
