"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from uuid import uuid4

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard.db.models import Base, Board, User, Workspace, WorkspaceMember

# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    # Import here to ensure env vars are set
    from taskboard.dependencies import get_db
    from taskboard.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def test_workspace(db: Session) -> Workspace:
    """Create a test workspace."""
    workspace = Workspace(id=str(uuid4()), name="Test Workspace")
    db.add(workspace)
    db.commit()
    db.refresh(workspace)
    return workspace


@pytest.fixture
def test_user(db: Session, test_workspace: Workspace) -> User:
    """Create a test user who is a member of the test workspace."""
    user = User(
        id=str(uuid4()),
        email="test@example.com",
        full_name="Test User",
        is_active=True,
    )
    db.add(user)
    db.add(WorkspaceMember(workspace_id=test_workspace.id, user_id=user.id))
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def outsider(db: Session) -> User:
    """Create a user who belongs to no workspace."""
    user = User(
        id=str(uuid4()),
        email="outsider@example.com",
        full_name="Outside User",
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_board(db: Session, test_workspace: Workspace) -> Board:
    """Create an empty board in the test workspace."""
    board = Board(
        id=str(uuid4()),
        public_id="brd000000001",
        workspace_id=test_workspace.id,
        name="Test Board",
    )
    db.add(board)
    db.commit()
    db.refresh(board)
    return board


@pytest.fixture
def other_board(db: Session, test_workspace: Workspace) -> Board:
    """Create a second empty board in the test workspace."""
    board = Board(
        id=str(uuid4()),
        public_id="brd000000002",
        workspace_id=test_workspace.id,
        name="Other Board",
    )
    db.add(board)
    db.commit()
    db.refresh(board)
    return board


@pytest.fixture
def authenticated_client(client: TestClient, test_user: User) -> TestClient:
    """Create an authenticated test client."""
    from taskboard.dependencies import get_current_user
    from taskboard.main import app

    def override_get_current_user():
        return test_user

    app.dependency_overrides[get_current_user] = override_get_current_user
    yield client
    if get_current_user in app.dependency_overrides:
        del app.dependency_overrides[get_current_user]


@pytest.fixture
def outsider_client(client: TestClient, outsider: User) -> TestClient:
    """Create a test client authenticated as a non-member."""
    from taskboard.dependencies import get_current_user
    from taskboard.main import app

    def override_get_current_user():
        return outsider

    app.dependency_overrides[get_current_user] = override_get_current_user
    yield client
    if get_current_user in app.dependency_overrides:
        del app.dependency_overrides[get_current_user]
