import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import casa_nala.config as config_mod
import casa_nala.db as db
from casa_nala.auth import create_user
from casa_nala.enums import Role
from casa_nala.main import app
from casa_nala.models import Base, MenuItem
from casa_nala.rate_limit import limiter
from casa_nala.view_cache import view_cache

TEST_PASSWORD = "contrasena-de-prueba"

# (id, name, category, price)
TEST_MENU = [
    (1, "Pozole Rojo", "Platos Fuertes", 120.0),
    (2, "Taco de Barbacoa", "Tacos", 55.0),
    (3, "Quesadilla de Flor de Calabaza", "Antojitos", 48.0),
    (4, "Tostada de Tinga", "Antojitos", 52.0),
    (5, "Sopes de Chicharrón", "Antojitos", 42.0),
    (6, "Agua Fresca de Jamaica", "Bebidas", 32.0),
]

ROLE_EMAILS = {
    Role.ADMIN: "admin@casanala.test",
    Role.COCINA: "cocina@casanala.test",
    Role.MESERO: "mesero@casanala.test",
    Role.CLIENTE: "cliente@casanala.test",
}


@pytest.fixture(autouse=True)
def _clean_views():
    """Start every test with empty views."""
    view_cache.clear()
    yield
    view_cache.clear()


@pytest.fixture
def session_factory():
    """In-memory SQLite database seeded with the demo menu and one user per role.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    for item_id, name, category, price in TEST_MENU:
        session.add(MenuItem(id=item_id, name=name, category=category, price=price,
                             description=f"{name} de la casa"))
    session.commit()
    for role, email in ROLE_EMAILS.items():
        create_user(session, email, TEST_PASSWORD, role=role)
    session.close()

    yield TestingSessionLocal

    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """Shared FastAPI TestClient bound to the in-memory database."""
    original_engine, original_session_local = db.engine, db.SessionLocal
    db.engine = session_factory.kw["bind"]
    db.SessionLocal = session_factory

    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    limiter.reset()
    db.engine, db.SessionLocal = original_engine, original_session_local


@pytest.fixture
def login_as(client):
    """Log the test client in as the given role (replacing any prior session)."""
    def _login(role: Role):
        client.cookies.clear()
        resp = client.post("/login", json={"email": ROLE_EMAILS[role], "password": TEST_PASSWORD})
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _login


@pytest.fixture
def order_payload():
    """Factory for a valid create-order payload."""
    def _make(order_type="recoger", items=None, address=None, total=None, **customer):
        items = items if items is not None else [
            {"id": 1, "name": "Pozole Rojo", "unitPrice": 120, "quantity": 2},
            {"id": 6, "name": "Agua Fresca de Jamaica", "unitPrice": 32, "quantity": 1},
        ]
        if total is None:
            total = sum(i["unitPrice"] * i["quantity"] for i in items)
            if order_type == "domicilio":
                total += config_mod.DELIVERY_FEE
        payload = {
            "items": items,
            "total": total,
            "type": order_type,
            "customer": {
                "name": customer.get("name", "Ana López"),
                "phone": customer.get("phone", "33 1234 5678"),
            },
        }
        if address is not None:
            payload["customer"]["address"] = address
        return payload
    return _make
