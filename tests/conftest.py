"""Shared fixtures: an in-memory database per test, catalog factories and an
authenticated API client."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import stockroom.models  # noqa: F401
from stockroom.core.database import Base, get_db
from stockroom.core.permissions import ADMIN, STAFF
from stockroom.core.security import create_access_token, get_password_hash
from stockroom.main import app
from stockroom.models.user import Role, User
from stockroom.schemas.inventory import CategoryCreate, ProductCreate, SupplierCreate
from stockroom.services import catalog


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


# ---------------------------------------------------------------------------
# Catalog factories
# ---------------------------------------------------------------------------
@pytest.fixture
def category(db):
    return catalog.create_category(db, CategoryCreate(name="Electronics"))


@pytest.fixture
def supplier(db):
    return catalog.create_supplier(
        db, SupplierCreate(name="Tech Distributors Inc.", email="sales@techdist.com", phone="+1-555-1000")
    )


@pytest.fixture
def make_product(db, category, supplier):
    """Create products with sensible defaults; keyword arguments override them."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Product {counter['n']}",
            "sku": f"SKU-{counter['n']:03d}",
            "price": Decimal("29.99"),
            "cost": Decimal("15.00"),
            "stock": 50,
            "min_stock": 10,
            "category_id": category.id,
            "supplier_id": supplier.id,
        }
        data.update(overrides)
        return catalog.create_product(db, ProductCreate(**data))

    return _make


@pytest.fixture
def mouse(make_product):
    """Wireless Mouse: price 29.99, cost 15.00, stock 50, min stock 10."""
    return make_product(name="Wireless Mouse", sku="ELEC-001")


# ---------------------------------------------------------------------------
# Users and API client
# ---------------------------------------------------------------------------
@pytest.fixture
def roles(db):
    admin = Role(name=ADMIN, description="Full access")
    staff = Role(name=STAFF, description="Point of sale")
    db.add_all([admin, staff])
    db.commit()
    return {ADMIN: admin, STAFF: staff}


def _create_user(db, role, email):
    user = User(
        email=email,
        full_name=email.split("@")[0].title(),
        hashed_password=get_password_hash("password123"),
        role_id=role.id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db, roles):
    return _create_user(db, roles[ADMIN], "admin@test.com")


@pytest.fixture
def staff_user(db, roles):
    return _create_user(db, roles[STAFF], "staff@test.com")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def staff_headers(staff_user):
    return auth_headers(staff_user)
