import os

# Must be set before freshharvest modules build their engine and settings
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from freshharvest.domain.models import Base, Product, Role, User
from freshharvest.infrastructure.db import SessionLocal, engine
from freshharvest.infrastructure.security import create_access_token, hash_password
from freshharvest.main import app


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def make_user(db, email, role=Role.BUYER, password="secret123", name=None):
    user = User(name=name or email.split("@")[0], email=email, password_hash=hash_password(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role.value)}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", role=Role.ADMIN, name="Admin User")


@pytest.fixture
def buyer(db):
    return make_user(db, "buyer@example.com", name="Buyer One")


@pytest.fixture
def other_buyer(db):
    return make_user(db, "other@example.com", name="Buyer Two")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def buyer_headers(buyer):
    return auth_headers(buyer)


@pytest.fixture
def other_headers(other_buyer):
    return auth_headers(other_buyer)


@pytest.fixture
def carrots(db):
    product = Product(
        name="Fresh Carrots",
        description="Locally grown organic carrots.",
        price=Decimal("1.99"),
        image_url="https://images.example.com/carrots.jpg",
        category="Vegetables",
        is_active=True,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def apples(db):
    product = Product(
        name="Organic Apples",
        description="Sweet and crisp organic apples.",
        price=Decimal("2.49"),
        image_url="https://images.example.com/apples.jpg",
        category="Fruits",
        is_active=True,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


DELIVERY = {
    "delivery_name": "Jane Grocer",
    "delivery_phone": "555-0100",
    "delivery_address": "12 Market Street, Springfield",
}


def order_payload(*lines):
    return {"items": [{"product_id": pid, "quantity": qty} for pid, qty in lines], **DELIVERY}
