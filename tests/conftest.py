from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from barbermarket import models
from barbermarket.db import get_session
from barbermarket.main import app

PASSWORD = "password123"

FIXED_PROFILE = {
    "base_price": "25",
    "appointment_duration": 45,
    "specialties": ["fades", "beard_trim"],
    "location_type": "fixed",
    "location_area": "North Campus",
    "exact_address": "12 College Ave, Room 3",
}


@pytest.fixture
def engine():
    # one shared in-memory database per test
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


@pytest.fixture
def client(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """Register a user and return bearer headers for it."""

    def _signup(email, role="customer"):
        r = client.post("/users", json={"email": email, "password": PASSWORD, "role": role})
        assert r.status_code == 201, r.text
        r = client.post("/auth/login", data={"username": email, "password": PASSWORD})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _signup


@pytest.fixture
def fixed_profile():
    """Profile payload for a barber working from a fixed address."""
    return dict(FIXED_PROFILE)


@pytest.fixture
def barber(client, signup):
    """An approved barber (45 minute appointments) as (headers, barber_id)."""
    headers = signup("barber@example.com", "barber")
    r = client.put(
        "/barbers/me/profile",
        headers=headers,
        json=FIXED_PROFILE,
    )
    assert r.status_code == 200, r.text
    return headers, r.json()["id"]


@pytest.fixture
def customer(signup):
    return signup("customer@example.com")


def add_barber(session, email="db-barber@example.com", duration=45, status="approved", location_type="fixed"):
    user = models.User(email=email, password_hash="x", role="barber")
    session.add(user)
    session.commit()
    session.refresh(user)
    profile = models.BarberProfile(
        user_id=user.id,
        base_price=Decimal("20.00"),
        appointment_duration=duration,
        location_type=location_type,
        status=status,
    )
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


def add_customer(session, email):
    user = models.User(email=email, password_hash="x", role="customer")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def make_barber():
    return add_barber


@pytest.fixture
def make_customer():
    return add_customer
