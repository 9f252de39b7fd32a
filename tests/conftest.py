# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from barberqueue import models  # noqa: F401
from barberqueue import queue_manager
from barberqueue.auth import user_to_dict
from barberqueue.db import get_session
from barberqueue.events import QueueEventBus
from barberqueue.main import app
from barberqueue.models import Shop, ShopBarber, User
from barberqueue.routers import shops_routes


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(autouse=True)
def bus(monkeypatch):
    fresh = QueueEventBus()
    monkeypatch.setattr(queue_manager, "bus", fresh)
    monkeypatch.setattr(shops_routes, "bus", fresh)
    return fresh


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    def _make(email: str, role: str, full_name: str = "Test User") -> dict:
        user = User(email=email, password_hash="x", full_name=full_name, role=role)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user_to_dict(user)

    return _make


@pytest.fixture
def barber(make_user):
    return make_user("barber@example.com", "barber", "Bob Barber")


@pytest.fixture
def other_barber(make_user):
    return make_user("other@example.com", "barber", "Olly Other")


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", "customer", "Alice")


@pytest.fixture
def bruno(make_user):
    return make_user("bruno@example.com", "customer", "Bruno")


@pytest.fixture
def shop(session, barber):
    shop = Shop(name="Sharp Cuts", address="1 Main St")
    session.add(shop)
    session.commit()
    session.refresh(shop)
    session.add(ShopBarber(shop_id=shop.id, barber_id=barber["id"]))
    session.commit()
    return shop


@pytest.fixture
def signup(client):
    """Create a user through the API and return auth headers."""

    def _signup(email: str, role: str, full_name: str = "Test User") -> dict:
        res = client.post(
            "/users",
            json={
                "email": email,
                "password": "password123",
                "full_name": full_name,
                "role": role,
            },
        )
        assert res.status_code == 201, res.text
        res = client.post("/auth/login", data={"username": email, "password": "password123"})
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['access_token']}"}

    return _signup
