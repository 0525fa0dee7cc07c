"""Authentication routes."""
from fastapi import APIRouter, HTTPException, status

from groupkeeper.api.deps import AppSettings, CurrentClaims, DatabaseSession
from groupkeeper.core.security import issue_token
from groupkeeper.schemas.account import ClaimsResponse, LoginRequest, TokenResponse
from groupkeeper.services.account_service import authenticate_account

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: DatabaseSession, settings: AppSettings):
    """
    Login and get a bearer token.

    Args:
        credentials: Login credentials
        db: Database session
        settings: Application settings

    Returns:
        Signed bearer token

    Raises:
        HTTPException: If credentials are invalid
    """
    account = authenticate_account(db, credentials.email, credentials.password)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = issue_token(account.email, account.role, settings)
    return TokenResponse(email=account.email, access_token=token)


@router.get("/me", response_model=ClaimsResponse)
def read_current_claims(claims: CurrentClaims):
    """Return the claims of the caller's token."""
    return claims
