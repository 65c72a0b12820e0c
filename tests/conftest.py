import os

# Settings are read at import time; configure them before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.models.base import Base
from app.config import settings
from app.core.security import create_access_token, hash_password
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.tenant import Tenant
from app.models.user import User
from app.models.role import Role, RolePermission
from app.models.permission import Permission
from app.seed import seed_permissions
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "secret123"
# Argon2 is slow; hash once and share it across fixture users
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


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


def create_test_token(user_id: int | str = 1, expired: bool = False) -> str:
    """
    Generate a JWT signed with the test SECRET_KEY.

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

    payload = {"sub": str(user_id), "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(user: User) -> dict:
    """Authorization headers carrying a freshly issued token for user"""
    token = create_access_token(user.id, user.email)
    return {"Authorization": f"Bearer {token}"}


def make_user(db_session, email: str, **fields) -> User:
    """Insert a user sharing the common test password"""
    user = User(email=email, password=TEST_PASSWORD_HASH, **fields)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_role(db_session, tenant: Tenant, name: str, permissions: list[Permission] = ()) -> Role:
    role = Role(name=name, tenant_id=tenant.id)
    for permission in permissions:
        role.role_permissions.append(RolePermission(permission=permission))
    db_session.add(role)
    db_session.commit()
    db_session.refresh(role)
    return role


# Reference data


@pytest.fixture
def permissions(db_session) -> dict[str, Permission]:
    """Seeded catalog keyed by codename"""
    return {permission.codename: permission for permission in seed_permissions(db_session)}


# Tenants


@pytest.fixture
def tenant_a(db_session):
    tenant = Tenant(name="Acme Corp", slug="acme", document="11.111.111/0001-11")
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def tenant_b(db_session):
    tenant = Tenant(name="Globex", slug="globex", document="22.222.222/0001-22")
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


# Users


@pytest.fixture
def super_admin(db_session):
    return make_user(
        db_session, "root@acme.io", name="Root", is_super_admin=True, tenant_id=None
    )


@pytest.fixture
def tenant_admin(db_session, tenant_a):
    return make_user(
        db_session, "admin@acme.io", name="Alice Admin", is_tenant_admin=True, tenant_id=tenant_a.id
    )


@pytest.fixture
def member(db_session, tenant_a):
    return make_user(db_session, "bob@acme.io", name="Bob", tenant_id=tenant_a.id)


@pytest.fixture
def other_admin(db_session, tenant_b):
    return make_user(
        db_session, "admin@globex.io", name="Gina Admin", is_tenant_admin=True, tenant_id=tenant_b.id
    )


@pytest.fixture
def other_member(db_session, tenant_b):
    return make_user(db_session, "hank@globex.io", name="Hank", tenant_id=tenant_b.id)


@pytest.fixture
def loner(db_session):
    """Regular user that belongs to no tenant"""
    return make_user(db_session, "loner@acme.io", name="Loner", tenant_id=None)


# Roles


@pytest.fixture
def role_a(db_session, tenant_a, permissions):
    return make_role(
        db_session, tenant_a, "Editors", [permissions["add_user"], permissions["view_user"]]
    )


@pytest.fixture
def role_b(db_session, tenant_b, permissions):
    return make_role(db_session, tenant_b, "Viewers", [permissions["view_user"]])


# Headers


@pytest.fixture
def super_admin_headers(super_admin):
    return headers_for(super_admin)


@pytest.fixture
def tenant_admin_headers(tenant_admin):
    return headers_for(tenant_admin)


@pytest.fixture
def member_headers(member):
    return headers_for(member)


@pytest.fixture
def other_admin_headers(other_admin):
    return headers_for(other_admin)
