import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from hr_access.access.roles import Role
from hr_access.database import get_db
from hr_access.models.base import Base
from hr_access.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from hr_access.models.plan import Plan
from hr_access.models.tenant import Tenant
from hr_access.models.tenant_membership import TenantMembership
from hr_access.models.user import User
from hr_access.models.user_permission import UserPermission  # noqa: F401
from hr_access.models.role_permission import RolePermission  # noqa: F401
# Import FastAPI app AFTER model imports
from hr_access.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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


def create_test_token(
    user_id: str = "test-user-123",
    tenant_id: int | str | None = None,
    impersonator: str | None = None,
    expired: bool = False,
) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        tenant_id: Tenant ID claim, omitted when None
        impersonator: Platform operator id for impersonation sessions
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}
    if tenant_id is not None:
        payload["tenant_id"] = tenant_id
    if impersonator is not None:
        payload["impersonator"] = impersonator

    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def headers_for(auth_user_id: str, tenant: Tenant, impersonator: str | None = None) -> dict:
    """Authorization headers for a user acting in a tenant"""
    token = create_test_token(user_id=auth_user_id, tenant_id=tenant.id, impersonator=impersonator)
    return {"Authorization": f"Bearer {token}"}


def add_member(db_session, tenant: Tenant, auth_user_id: str, role: Role) -> User:
    """Create a user with a membership in tenant"""
    user = User(auth_user_id=auth_user_id, email=f"{auth_user_id}@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.add(TenantMembership(tenant_id=tenant.id, user_id=user.id, role=role))
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def starter_plan(db_session):
    """Plan with leave and time tracking only"""
    plan = Plan(name="Starter", modules=["employees", "leave", "time_tracking"])
    db_session.add(plan)
    db_session.commit()
    db_session.refresh(plan)
    return plan


@pytest.fixture
def enterprise_plan(db_session):
    """Plan including every module"""
    plan = Plan(name="Enterprise", modules="all")
    db_session.add(plan)
    db_session.commit()
    db_session.refresh(plan)
    return plan


@pytest.fixture
def company(db_session, starter_plan):
    """Active tenant on the starter plan"""
    tenant = Tenant(name="Acme Corp", plan_id=starter_plan.id)
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def admin_user(db_session, company):
    return add_member(db_session, company, "admin-user", Role.COMPANY_ADMIN)


@pytest.fixture
def hr_user(db_session, company):
    return add_member(db_session, company, "hr-user", Role.HR_MANAGER)


@pytest.fixture
def manager_user(db_session, company):
    return add_member(db_session, company, "manager-user", Role.MANAGER)


@pytest.fixture
def employee_user(db_session, company):
    return add_member(db_session, company, "employee-user", Role.EMPLOYEE)


@pytest.fixture
def super_admin_user(db_session, company):
    return add_member(db_session, company, "super-admin-user", Role.SUPER_ADMIN)


@pytest.fixture
def admin_headers(company, admin_user):
    return headers_for(admin_user.auth_user_id, company)


@pytest.fixture
def hr_headers(company, hr_user):
    return headers_for(hr_user.auth_user_id, company)


@pytest.fixture
def manager_headers(company, manager_user):
    return headers_for(manager_user.auth_user_id, company)


@pytest.fixture
def employee_headers(company, employee_user):
    return headers_for(employee_user.auth_user_id, company)


@pytest.fixture
def super_admin_headers(company, super_admin_user):
    return headers_for(super_admin_user.auth_user_id, company)
