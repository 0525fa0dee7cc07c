"""Security utilities for password hashing and bearer token signing."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from passlib.context import CryptContext

from groupkeeper.config import Settings
from groupkeeper.core.errors import TokenExpiredError, TokenInvalidError
from groupkeeper.models.account import AccountRole

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

REQUIRED_CLAIMS = ["email", "role", "iat", "exp"]


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


@dataclass(frozen=True)
class TokenClaims:
    """Decoded contents of a bearer token."""

    email: str
    role: AccountRole
    issued_at: int
    expires_at: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TokenClaims":
        """Build claims from a decoded JWT payload."""
        try:
            return cls(
                email=str(payload["email"]),
                role=AccountRole(payload["role"]),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TokenInvalidError(f"Malformed token claims: {exc}") from exc

    def to_payload(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "role": self.role.value,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }


def issue_token(
    email: str,
    role: AccountRole | str,
    settings: Settings,
    issued_at: datetime | None = None,
) -> str:
    """
    Sign a bearer token for an account.

    Args:
        email: Account email, stored in the ``email`` claim
        role: Account role
        settings: Application settings (secret, algorithm, lifetime)
        issued_at: Issue time, defaults to now

    Returns:
        Compact JWT string
    """
    issued = issued_at or datetime.now(UTC)
    expires = issued + timedelta(hours=settings.token_lifetime_hours)
    claims = TokenClaims(
        email=email,
        role=AccountRole(role),
        issued_at=int(issued.timestamp()),
        expires_at=int(expires.timestamp()),
    )
    return jwt.encode(claims.to_payload(), settings.secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> TokenClaims:
    """
    Validate a token's signature and expiry against the current clock.

    Args:
        token: Compact JWT string
        settings: Application settings

    Returns:
        Decoded claims

    Raises:
        TokenExpiredError: If the signature is valid but ``exp`` has passed
        TokenInvalidError: For any other signature, structure or claim problem
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError(str(exc)) from exc
    except jwt.InvalidTokenError as exc:
        raise TokenInvalidError(str(exc)) from exc
    return TokenClaims.from_payload(payload)


def renew_token(token: str, settings: Settings) -> str:
    """
    Re-issue an expired token with the same subject and role.

    The signature is still checked; only the expiry check is skipped.

    Raises:
        TokenInvalidError: If the token was not signed by us or is malformed
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": False, "require": REQUIRED_CLAIMS},
        )
    except jwt.InvalidTokenError as exc:
        raise TokenInvalidError(str(exc)) from exc

    claims = TokenClaims.from_payload(payload)
    return issue_token(claims.email, claims.role, settings)
