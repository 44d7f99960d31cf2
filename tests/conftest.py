import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./fleet_rbac_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-fleet-rbac")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from fleet_rbac.database import get_db
from fleet_rbac.models.base import Base
from fleet_rbac.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from fleet_rbac.models.tenant import Tenant
from fleet_rbac.models.user import User
from fleet_rbac.models.custom_role import CustomRole  # noqa: F401
from fleet_rbac.models.role_permission_override import RolePermissionOverride  # noqa: F401
from fleet_rbac.repositories.tenant_repository import TenantRepository
# Import FastAPI app AFTER model imports
from fleet_rbac.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TENANT_ID = "DOT123456"
OTHER_TENANT_ID = "DOT654321"


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(auth_user_id: str) -> dict:
    """Authorization headers for a given auth user id"""
    return {"Authorization": f"Bearer {create_test_token(user_id=auth_user_id)}"}


def add_user(db_session, auth_user_id: str, role: str, tenant_id: str = TENANT_ID) -> User:
    """Insert a user holding ``role`` in ``tenant_id``"""
    user = User(auth_user_id=auth_user_id, tenant_id=tenant_id, organization_role=role)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def tenant(db_session):
    """Primary test tenant"""
    return TenantRepository(db_session).create(Tenant(id=TENANT_ID, name="Acme Trucking"))


@pytest.fixture
def other_tenant(db_session):
    """Second tenant for isolation tests"""
    return TenantRepository(db_session).create(Tenant(id=OTHER_TENANT_ID, name="Other Freight"))


@pytest.fixture
def owner_user(db_session, tenant):
    return add_user(db_session, "test-user-123", "owner")


@pytest.fixture
def admin_user(db_session, tenant):
    return add_user(db_session, "admin-user", "admin")


@pytest.fixture
def manager_user(db_session, tenant):
    return add_user(db_session, "manager-user", "manager")


@pytest.fixture
def regular_user(db_session, tenant):
    return add_user(db_session, "regular-user", "user")


@pytest.fixture
def viewer_user(db_session, tenant):
    return add_user(db_session, "viewer-user", "viewer")


@pytest.fixture
def owner_headers(owner_user):
    """Authorization headers for the tenant owner"""
    return headers_for(owner_user.auth_user_id)


@pytest.fixture
def admin_headers(admin_user):
    return headers_for(admin_user.auth_user_id)


@pytest.fixture
def manager_headers(manager_user):
    return headers_for(manager_user.auth_user_id)


@pytest.fixture
def user_headers(regular_user):
    return headers_for(regular_user.auth_user_id)


@pytest.fixture
def viewer_headers(viewer_user):
    return headers_for(viewer_user.auth_user_id)
