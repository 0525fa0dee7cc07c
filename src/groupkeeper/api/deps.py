"""FastAPI dependencies for authentication and database."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from groupkeeper.config import Settings, get_settings
from groupkeeper.core.auth import AuthContext, authenticate, authorize
from groupkeeper.core.security import TokenClaims
from groupkeeper.database import get_db
from groupkeeper.models import AccountRole

# HTTP Bearer token authentication
bearer_scheme = HTTPBearer(auto_error=False)

BearerToken = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _raw_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    return credentials.credentials if credentials else None


def get_current_claims(
    request: Request,
    credentials: BearerToken,
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenClaims:
    """
    Authenticate the request and attach the claims to ``request.state``.

    Args:
        request: Incoming request
        credentials: Bearer credentials from the Authorization header
        settings: Application settings

    Returns:
        Claims of the (possibly renewed) token
    """
    context: AuthContext = authenticate(_raw_token(credentials), settings)
    request.state.auth = context
    request.state.claims = context.claims
    return context.claims


def require_roles(*roles: AccountRole) -> Callable[..., TokenClaims]:
    """
    Build a dependency that only lets the given roles through.

    Usage:
        @router.post("", dependencies=[Depends(require_roles(AccountRole.ELEVATED))])
    """
    gate = authorize(*roles)

    def check_roles(
        credentials: BearerToken,
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> TokenClaims:
        return gate.check(_raw_token(credentials), settings)

    return check_roles


# Type aliases for cleaner dependency injection
CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]
DatabaseSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
RequireElevated = Depends(require_roles(AccountRole.ELEVATED))
