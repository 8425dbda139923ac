"""
Pytest fixtures and configuration for the Doctor Planet backend tests

Every test runs against a fresh in-memory SQLite database; the API client
shares the test's session through a `get_db` override.

Author: DP Team
Date: 2025-06-10
"""
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_SECRET"] = "test-secret"
os.environ["SMTP_HOST"] = ""
os.environ["SUPABASE_URL"] = ""

from decimal import Decimal
from functools import lru_cache

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.auth import ROLE_ADMIN, ROLE_SALESMAN, ROLE_USER, create_session_token, hash_password
from app.core.database import Base, get_db
from app.core.rate_limit import rate_limiter
from app.main import app
from app.models import Category, Product, User

TEST_PASSWORD = "password123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@lru_cache(maxsize=1)
def _password_hash() -> str:
    # bcrypt is slow; hash once per run
    return hash_password(TEST_PASSWORD)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def db():
    """
    Provides a session on a freshly created schema

    Scope: function (tables dropped and recreated per test)
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db):
    """TestClient whose requests use the test session"""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def make_user(db):
    """Create an account; customers get a complete profile unless told otherwise"""
    counter = {"n": 0}

    def _make(role=ROLE_USER, email=None, name=None, complete_profile=True, is_active=True):
        counter["n"] += 1
        user = User(
            email=email or f"{role.lower()}{counter['n']}@example.com",
            name=name or f"{role.title()} {counter['n']}",
            password_hash=_password_hash(),
            role=role,
            is_active=is_active,
        )
        if complete_profile:
            user.phone = "+92 300 0000000"
            user.address = "12 Clinic Road"
            user.city = "Lahore"
            user.postal_code = "54000"
            user.country = "Pakistan"
            user.profession = "Doctor"
            user.is_profile_complete = True
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def _make(name=None, price="1000", sale_price=None, stock=10, color_size_stock=None, category=None, **extra):
        counter["n"] += 1
        name = name or f"Scrub Set {counter['n']}"
        product = Product(
            name=name,
            slug=extra.pop("slug", f"scrub-set-{counter['n']}"),
            price=Decimal(price),
            sale_price=Decimal(sale_price) if sale_price is not None else None,
            stock=stock,
            color_size_stock=color_size_stock,
            category_id=category.id if category else None,
            images=extra.pop("images", []),
            sizes=extra.pop("sizes", []),
            colors=extra.pop("colors", []),
            **extra,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def category(db):
    row = Category(name="Medical Clothes", slug="medical-clothes", description="Scrubs and lab coats")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def customer(make_user):
    return make_user(ROLE_USER)


@pytest.fixture
def admin(make_user):
    return make_user(ROLE_ADMIN)


@pytest.fixture
def salesman(make_user):
    return make_user(ROLE_SALESMAN, complete_profile=False)


def auth_headers(user: User) -> dict:
    token = create_session_token(user.id, user.email, user.name, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def salesman_headers(salesman):
    return auth_headers(salesman)


@pytest.fixture
def shipping_address():
    return {
        "name": "Dr. Ayesha Khan",
        "phone": "+92 300 1111111",
        "address": "12 Clinic Road",
        "city": "Lahore",
        "postal_code": "54000",
    }


@pytest.fixture
def headers_for():
    """Bearer headers for any user created in the test"""
    return auth_headers
