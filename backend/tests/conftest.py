import itertools
import logging
import os

# Point settings at an in-memory database before any catalog module is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient

from catalog.api.schemas.product import ProductCreate
from catalog.core.security import create_access_token
from catalog.db.base import Base
from catalog.db.session import SessionLocal, engine
from catalog.main import app
from catalog.services import product_catalog

# Suppress noisy logs from SQLAlchemy during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def db_tables():
    """Give every test an empty schema."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(db_tables):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


def _bearer(subject, roles):
    return {"Authorization": f"Bearer {create_access_token(subject, roles)}"}


@pytest.fixture
def editor_headers():
    return _bearer("librarian@example.com", ["Librarian"])


@pytest.fixture
def admin_headers():
    return _bearer("admin@example.com", ["Admin"])


@pytest.fixture
def viewer_headers():
    return _bearer("reader@example.com", ["Reader"])


@pytest.fixture
def product_payload():
    """Build a camelCase create payload; keyword overrides replace defaults."""

    def _build(**overrides):
        payload = {
            "name": "Widget",
            "description": "A useful widget",
            "price": 9.99,
            "category": "Tools",
            "stockQuantity": 5,
            "sku": "W-001",
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def make_product(db_session):
    """Insert a product through the service layer and return its view."""
    sku_numbers = itertools.count(1)

    def _make(**fields):
        data = {
            "name": "Widget",
            "price": "9.99",
            "category": "Tools",
            "stock_quantity": 5,
            "sku": f"SKU-{next(sku_numbers):03d}",
        }
        data.update(fields)
        return product_catalog.create_product(db_session, ProductCreate(**data))

    return _make
