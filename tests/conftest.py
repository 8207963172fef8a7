import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import accounts
from database import Base, get_db
from main import app
from models import Product, UserRole
from schemas import OrderItemIn, ShippingDetails
from security import create_access_token

engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(name="Alice", email="alice@example.com", role=UserRole.USER, password="secret123"):
        return accounts.create_user(db, name, email, password, role)
    return _make


@pytest.fixture
def make_product(db):
    def _make(name="Widget", price="10.00", seller_id=None, stock=None, description=None, category=None,
              image_url=None):
        product = Product(name=name, price=Decimal(price), seller_id=seller_id, stock_quantity=stock,
                          description=description, category=category, image_url=image_url)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


def auth_headers(user):
    token = create_access_token({"sub": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


def item(product_id, name, price, quantity):
    return OrderItemIn(product_id=product_id, name=name,
                       price=Decimal(price) if price is not None else None, quantity=quantity)


def shipping(name="Bob Buyer"):
    return ShippingDetails(name=name, email="bob@example.com", address="1 Main St", city="Springfield",
                           zip_code="12345")
