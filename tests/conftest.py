"""
Fixtures de pytest para el backend POS.

Base SQLite en memoria por test, cliente HTTP con get_db sobrescrito y
helpers para sembrar inventario.
"""

import os

# Antes de importar la app: sin archivo local ni creación de tablas al iniciar
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import Base, get_db
from app.core.locking import KeyedLockRegistry
from app.main import app
from app.shared.database.models import InventoryItem


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
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def locks():
    return KeyedLockRegistry()


@pytest.fixture
def client(session_factory):
    """Cliente HTTP contra la app con la base del test"""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_inventory(db_session):
    """Crear un item de inventario directamente en la base"""

    def _add(item_name, stock, price="10.00", classification=None):
        item = InventoryItem(
            item_name=item_name,
            price=Decimal(price),
            stock=stock,
            item_classification=classification,
        )
        db_session.add(item)
        db_session.commit()
        return item

    return _add


@pytest.fixture
def stock_of(session_factory):
    """Leer el stock actual con una sesión nueva"""

    def _stock_of(item_name):
        session = session_factory()
        try:
            item = session.query(InventoryItem).filter(InventoryItem.item_name == item_name).first()
            return item.stock if item else None
        finally:
            session.close()

    return _stock_of
