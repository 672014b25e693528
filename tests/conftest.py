import os

# Must be set before kiit_rentals is imported: the engine and secret are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kiit_rentals.core.database_client import get_db
from kiit_rentals.main import app
from kiit_rentals.models.base import Base
from kiit_rentals.models import user, sql_product  # noqa: F401


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
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def future_date():
    return (date.today() + timedelta(days=7)).isoformat()


@pytest.fixture
def past_date():
    return (date.today() - timedelta(days=1)).isoformat()


def make_product(**overrides):
    product = {
        "name": "Book",
        "price": 100,
        "image": "http://x/y.jpg",
        "type": "sale",
        "category": "books",
        "phone": "9876543210",
    }
    product.update(overrides)
    return product


def signup_user(client, name="A", email="a@x.com", password="secret1"):
    response = client.post("/api/user/signup", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.json()
    return response.json()["data"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
