import os

# Settings are read at import time; configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret-key"
os.environ["ENVIRONMENT"] = "test"

import pytest
from datetime import datetime, timedelta, UTC
from decimal import Decimal
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
from app.models.tenant import Tenant, SYSTEM_TENANT_ID
from app.models.user import User
from app.models.role import UserRole
from app.models.business_type import BusinessType
from app.models.template import ProductTemplate, ServiceTemplate
from app.models.pricing_rule import PricingRule
from app.models.customer import Customer
from app.models.order import Order
# Import FastAPI app AFTER model imports
from app.main import app

API = settings.API_PREFIX
TEST_PASSWORD = "password123"
# bcrypt is slow on purpose; hash once for every fixture user
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)

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
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(
    user_id: str = "test-user-123",
    tenant_id: str | None = "tenant-a",
    role: str = "USER",
    token_type: str = "access",
    expired: bool = False,
    secret: str | None = None,
) -> str:
    """
    Generate a JWT for testing without a stored user.

    Args:
        user_id: User ID to embed in 'sub' claim
        tenant_id: Tenant ID claim (omitted when None)
        token_type: Value of the 'type' claim
        expired: If True, create expired token
        secret: Signing key, defaults to SECRET_KEY

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "role": role, "type": token_type, "exp": exp, "iat": datetime.now(UTC)}
    if tenant_id is not None:
        payload["tenant_id"] = tenant_id

    return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm="HS256")


def auth_headers_for(user: User) -> dict[str, str]:
    """Authorization headers carrying a real access token for the user"""
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def make_tenant(db, tenant_id: str, name: str, **kwargs) -> Tenant:
    tenant = Tenant(id=tenant_id, name=name, business_type="LAUNDRY_SERVICE", settings={}, **kwargs)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


def make_user(db, tenant: Tenant, role: UserRole, email: str, **kwargs) -> User:
    user = User(
        tenant_id=tenant.id,
        email=email,
        password_hash=TEST_PASSWORD_HASH,
        first_name=role.value.title(),
        last_name="Tester",
        role=role,
        **kwargs,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def system_tenant(db_session):
    return make_tenant(db_session, SYSTEM_TENANT_ID, "System")


@pytest.fixture
def super_admin(db_session, system_tenant):
    return make_user(db_session, system_tenant, UserRole.SUPER_ADMIN, "root@example.com")


@pytest.fixture
def tenant_a(db_session):
    return make_tenant(db_session, "tenant-a", "Clean Carpets A", domain="carpets-a.example.com")


@pytest.fixture
def tenant_b(db_session):
    return make_tenant(db_session, "tenant-b", "Fresh Laundry B")


@pytest.fixture
def admin_a(db_session, tenant_a):
    return make_user(db_session, tenant_a, UserRole.ADMIN, "admin@carpets-a.example.com")


@pytest.fixture
def employee_a(db_session, tenant_a):
    return make_user(db_session, tenant_a, UserRole.EMPLOYEE, "staff@carpets-a.example.com")


@pytest.fixture
def admin_b(db_session, tenant_b):
    return make_user(db_session, tenant_b, UserRole.ADMIN, "admin@laundry-b.example.com")


@pytest.fixture
def super_admin_headers(super_admin):
    return auth_headers_for(super_admin)


@pytest.fixture
def admin_a_headers(admin_a):
    return auth_headers_for(admin_a)


@pytest.fixture
def employee_a_headers(employee_a):
    return auth_headers_for(employee_a)


@pytest.fixture
def admin_b_headers(admin_b):
    return auth_headers_for(admin_b)


@pytest.fixture
def carpet_business_type(db_session):
    business_type = BusinessType(
        name="CARPET_CLEANING", display_name="Carpet Cleaning", sort_order=1
    )
    db_session.add(business_type)
    db_session.commit()
    db_session.refresh(business_type)
    return business_type


@pytest.fixture
def wool_carpet(db_session, carpet_business_type):
    """Product template priced per m2"""
    template = ProductTemplate(
        business_type_id=carpet_business_type.id,
        name="Wool Carpet",
        description="Hand washed wool carpet",
        base_price=Decimal("15.00"),
        category="CARPET",
        unit="m2",
        attributes={
            "stain": {
                "label": "Stain treatment",
                "type": "select",
                "pricingModifier": {"type": "multiplier", "multiplier": 1.2},
            },
            "fringe": {
                "label": "Fringe repair",
                "type": "boolean",
                "pricingModifier": {"type": "fixed", "amount": 25},
            },
        },
    )
    db_session.add(template)
    db_session.commit()
    db_session.refresh(template)
    return template


@pytest.fixture
def pickup_service(db_session, carpet_business_type):
    template = ServiceTemplate(
        business_type_id=carpet_business_type.id,
        name="Pickup",
        base_price=Decimal("50.00"),
        category="LOGISTICS",
        duration=30,
    )
    db_session.add(template)
    db_session.commit()
    db_session.refresh(template)
    return template


def make_rule(db, business_type: BusinessType, name: str, rule_type: str, **kwargs) -> PricingRule:
    """Store a rule as-is, bypassing write validation"""
    rule = PricingRule(
        business_type_id=business_type.id,
        name=name,
        rule_type=rule_type,
        conditions=kwargs.pop("conditions", {}),
        calculation=kwargs.pop("calculation", {}),
        **kwargs,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


def make_customer(db, tenant: Tenant, name: str, phone: str) -> Customer:
    customer = Customer(tenant_id=tenant.id, name=name, phone=phone, address="Main Street 1")
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


@pytest.fixture
def customer_a(db_session, tenant_a):
    return make_customer(db_session, tenant_a, "Ayse Yilmaz", "+905551110000")


@pytest.fixture
def customer_b(db_session, tenant_b):
    return make_customer(db_session, tenant_b, "Mehmet Demir", "+905552220000")
