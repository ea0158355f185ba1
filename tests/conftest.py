"""
Fixtures compartidas: BD SQLite en memoria por prueba, cliente HTTP y datos base.

Datos sembrados:
    Tienda Centro (A): manager_a, cashier_a, cashier_a2
    Tienda Norte  (B): manager_b, cashier_b
    admin (sin tienda)
PIN de manager_a y admin: 123456. manager_b: 654321.
"""
import os

# Antes de importar la app: nada de sql_app.db en disco durante las pruebas
os.environ.setdefault("CASHDRAWER_DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cashdrawer.database import Base, get_db
from cashdrawer.main import app
from cashdrawer.init_db import seed_demo, DEMO_PIN, DEMO_PIN_STORE_B
from cashdrawer.crud import cash_sessions as ledger
from cashdrawer.security import create_access_token

MANAGER_PIN = DEMO_PIN
OTHER_PIN = DEMO_PIN_STORE_B


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
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def org(db):
    return seed_demo(db)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth(user):
    token = create_access_token({"sub": user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def open_session(db):
    """Abre una sesión directamente en la BD, con ventas opcionales ya registradas."""
    def _open(cashier, store, opening="1000.00", cash_sales=None):
        session = ledger.insert_open_session(db, store.id, cashier.id, Decimal(opening))
        if cash_sales is not None:
            ledger.record_sale(db, session.id, "cash", Decimal(cash_sales))
        db.refresh(session)
        return session
    return _open
