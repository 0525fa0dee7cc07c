"""Test fixtures and configuration."""
import os
from collections.abc import Callable, Generator

# Keep the app's own lifespan engine off disk before anything imports settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("OTEL_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from groupkeeper.config import Settings, get_settings
from groupkeeper.core.security import issue_token
from groupkeeper.database import Base, get_db
from groupkeeper.main import app
from groupkeeper.models import Account, AccountRole, Group
from groupkeeper.services.account_service import create_account
from groupkeeper.services.group_service import create_group

TEST_PASSWORD = "TestPassword123!"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Get test settings."""
    return Settings(
        database_url="sqlite:///:memory:",
        secret_key="test-secret-key-minimum-32-characters-long",
        environment="test",
        otel_enabled=False,
    )


@pytest.fixture(scope="function")
def db_engine(test_settings):
    """Create a test database engine."""
    engine = create_engine(
        test_settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session, test_settings) -> Generator[TestClient, None, None]:
    """Create a test client."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    def override_get_settings():
        return test_settings

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = override_get_settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_account(db_session) -> Callable[..., Account]:
    """Factory for persisted accounts."""

    def _make(
        name: str = "alice",
        email: str | None = None,
        role: AccountRole = AccountRole.STANDARD,
    ) -> Account:
        return create_account(
            db_session,
            name=name,
            email=email or f"{name}@example.com",
            password=TEST_PASSWORD,
            role=role,
        )

    return _make


@pytest.fixture
def make_group(db_session) -> Callable[..., Group]:
    """Factory for persisted groups."""

    def _make(name: str = "G1") -> Group:
        return create_group(db_session, name=name)

    return _make


@pytest.fixture
def auth_headers(test_settings) -> Callable[[Account], dict[str, str]]:
    """Build an Authorization header for an account."""

    def _headers(account: Account) -> dict[str, str]:
        token = issue_token(account.email, account.role, test_settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def test_password() -> str:
    """Password used by every factory-made account."""
    return TEST_PASSWORD
