import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from app.database import Base, get_db
from app.main import app
from app.models.user import User, UserRole
from app.services import auth as auth_service
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_PASSWORD = "AdminPassword123!"

# Hashing is deliberately slow; compute once for all fixture users
_HASHED_PASSWORD = auth_service.get_password_hash(ADMIN_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """
    Fresh schema per test. Services commit and roll back for real, so the
    tables are rebuilt instead of wrapping the test in an outer transaction.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory for directory users: make_user("alice", manager=bob, is_active=False)."""
    counter = {"n": 0}

    def _make_user(name: str, manager: User = None, role: UserRole = UserRole.EMPLOYEE, is_active: bool = True):
        counter["n"] += 1
        user = User(
            email=f"{name.lower()}@example.com",
            hashed_password=_HASHED_PASSWORD,
            first_name=name.capitalize(),
            last_name="Tester",
            employee_code=f"EMP-{counter['n']:04d}",
            role=role,
            manager_id=manager.id if manager else None,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture(scope="function")
def admin_user(make_user):
    """Create a default HR Admin user for tests."""
    return make_user("admin", role=UserRole.HR_ADMIN)


@pytest.fixture(scope="function")
def get_token():
    """Helper fixture to create access tokens."""
    def _get_token(user):
        return auth_service.create_access_token(data={"sub": user.email, "role": user.role.value})
    return _get_token


@pytest.fixture(scope="function")
def auth_headers(admin_user, get_token):
    return {"Authorization": f"Bearer {get_token(admin_user)}"}


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
