"""Bearer token authentication and role-based authorization."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from groupkeeper.config import Settings
from groupkeeper.core.errors import (
    ForbiddenError,
    InternalError,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
)
from groupkeeper.core.security import TokenClaims, renew_token, verify_token
from groupkeeper.models import AccountRole

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """Resolved identity for the current request."""

    claims: TokenClaims
    token: str
    renewed: bool = False


def authenticate(token: str | None, settings: Settings) -> AuthContext:
    """
    Resolve the caller's claims from a bearer token.

    An expired token is renewed in place and the request continues with the
    renewed claims. The renewed token stays on the returned context; it is
    not sent back to the caller.

    Args:
        token: Raw bearer token, or None if the header was absent
        settings: Application settings

    Returns:
        AuthContext for the request

    Raises:
        UnauthorizedError: If no token was supplied
        InternalError: If the token fails verification for any reason other than expiry
    """
    if not token:
        raise UnauthorizedError("Not authorized")

    try:
        claims = verify_token(token, settings)
    except TokenExpiredError:
        try:
            renewed = renew_token(token, settings)
            claims = verify_token(renewed, settings)
        except TokenError as exc:
            logger.error("Token renewal failed: %s", exc)
            raise InternalError("Token verification failed") from exc
        logger.info("Renewed expired token for %s", claims.email, extra={"email": claims.email})
        return AuthContext(claims=claims, token=renewed, renewed=True)
    except TokenInvalidError as exc:
        logger.error("Token verification failed: %s", exc)
        raise InternalError("Token verification failed") from exc

    return AuthContext(claims=claims, token=token)


class RoleGate:
    """Check that a bearer token carries one of the required roles.

    The token is verified on its own; an expired token is refused rather
    than renewed.
    """

    def __init__(self, required_roles: Iterable[AccountRole | str]):
        self.required_roles = frozenset(AccountRole(role) for role in required_roles)
        if not self.required_roles:
            raise ValueError("RoleGate requires at least one role")

    def check(self, token: str | None, settings: Settings) -> TokenClaims:
        """
        Verify the token and its role.

        Raises:
            UnauthorizedError: If the token is missing, expired or invalid
            ForbiddenError: If the token's role is not required
        """
        if not token:
            raise UnauthorizedError("Not logged in")

        try:
            claims = verify_token(token, settings)
        except TokenError as exc:
            raise UnauthorizedError(str(exc)) from exc

        if claims.role not in self.required_roles:
            logger.info(
                "Refused %s with role %s",
                claims.email,
                claims.role.value,
                extra={"email": claims.email},
            )
            raise ForbiddenError()

        return claims


def authorize(*required_roles: AccountRole | str) -> RoleGate:
    """Build a role gate for the given roles."""
    return RoleGate(required_roles)
