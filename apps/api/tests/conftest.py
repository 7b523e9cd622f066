"""
Test configuration and fixtures.

Provides:
- SQLite in-memory database, schema created and dropped around each test
- Users with session tokens for authenticated tests
- HTTPX AsyncClient bound to the test session
"""
import os
import uuid
from typing import AsyncGenerator, Generator

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ.setdefault("INTERNAL_SECRET", "test-internal-secret")
os.environ.setdefault("S3_BUCKET", "test-bucket")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from taskwise.core.deps import get_db
from taskwise.core.security import create_session_token, hash_password
from taskwise.db.base import Base
from taskwise.db.models import User
from taskwise.db.session import SessionLocal, engine
from taskwise.main import app

TEST_PASSWORD = "correct-horse-battery"
# Hash once per run, bcrypt is slow
_PASSWORD_HASH = hash_password(TEST_PASSWORD)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema per test; app code may commit freely."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def make_user(db: Session, username: str) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        email=f"{username.lower()}-{uuid.uuid4().hex[:6]}@test.com",
        password_hash=_PASSWORD_HASH,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def user_factory(db: Session):
    """Create extra users inside a test."""
    return lambda username: make_user(db, username)


@pytest.fixture
def alice(db: Session) -> User:
    return make_user(db, "Alice")


@pytest.fixture
def bob(db: Session) -> User:
    return make_user(db, "Bob")


@pytest.fixture
def carol(db: Session) -> User:
    return make_user(db, "Carol")


# =============================================================================
# Auth Helpers
# =============================================================================

def _bearer(user: User) -> dict[str, str]:
    token = create_session_token(user.id, user.username, user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Callable returning the bearer header for a user."""
    return _bearer


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient sharing the test session; pass auth_headers(user) per request."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# Aggregate Fixtures
# =============================================================================

@pytest.fixture
def workspace(db: Session, alice: User, bob: User):
    """Workspace with alice as Admin and bob as Member."""
    from taskwise.schemas.workspace import WorkspaceCreate
    from taskwise.services import workspace_service

    ws, _ = workspace_service.create_workspace(
        db, alice, WorkspaceCreate(name="Platform", member_emails=[bob.email])
    )
    return ws


@pytest.fixture
def project(db: Session, alice: User, workspace):
    """Project with the default three columns."""
    from taskwise.schemas.project import ProjectCreate
    from taskwise.services import project_service

    return project_service.create_project(
        db, alice, ProjectCreate(name="Roadmap", workspace_id=workspace.id)
    )
