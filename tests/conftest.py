from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_admin.database.connection import Base, get_db
from catalog_admin.main import app
from catalog_admin.models.product import Product  # noqa: F401  registers the table
from catalog_admin.schemas.product import ProductResponse

TEST_DB_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2026, 9, 1, 12, 0, 0)


@pytest.fixture(scope="session", autouse=True)
def create_test_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    connection = engine.connect()
    trans = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_product(product_id, name=None, category="electronics", price=100.0, stock=20,
                 status="active", sales=0, created_at=None):
    """Build a snapshot record without touching the store."""
    return ProductResponse(
        id=product_id,
        name=name or f"Product {product_id}",
        category=category,
        price=price,
        stock=stock,
        status=status,
        sales=sales,
        created_at=created_at or BASE_TIME + timedelta(hours=product_id),
    )


@pytest.fixture()
def product_factory():
    return make_product
