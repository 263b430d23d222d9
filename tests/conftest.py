import os
from decimal import Decimal

import pytest

# Environment defaults must be in place before storefront.core.config is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from storefront import models  # noqa: E402,F401
from storefront.core.db import Base  # noqa: E402
from storefront.core.deps import get_db  # noqa: E402
from storefront.main import app  # noqa: E402
from storefront.models import AttributeType, Product  # noqa: E402
from storefront.schemas import SkuCreate  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def attribute_type(db) -> AttributeType:
    attribute_type = AttributeType(name="Colour")
    db.add(attribute_type)
    db.commit()
    return attribute_type


@pytest.fixture
def product(db) -> Product:
    product = Product(sku="ABC", name="Cotton Shirt", single=False)
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def single_product(db) -> Product:
    product = Product(sku="ONE", name="Gift Card", single=True)
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def sku_payload(product, attribute_type):
    """Build a SkuCreate that passes every rule; keyword arguments override fields."""

    def _build(**overrides) -> SkuCreate:
        fields = {
            "code": "001",
            "length": Decimal("10.00"),
            "weight": Decimal("2.00"),
            "thickness": Decimal("0.50"),
            "attribute_value": "Red",
            "attribute_type_id": attribute_type.id,
            "stock": 10,
            "stock_warning_level": 5,
            "cost_value": "8.50",
            "price": "12.34",
            "product_id": product.id,
            "active": True,
        }
        fields.update(overrides)
        return SkuCreate(**fields)

    return _build
