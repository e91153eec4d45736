"""Pytest configuration and shared fixtures."""
import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.main import app
from app.services.accounts import register_user


@pytest.fixture(autouse=True)
def _fresh_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """HTTP client that keeps cookies and does not follow redirects."""
    return TestClient(app, follow_redirects=False)


@pytest.fixture()
def make_user(db):
    def _make(email="john@example.com", password="password123", full_name="John Doe"):
        return register_user(db, full_name, email, password, password)

    return _make


@pytest.fixture()
def login(client):
    def _login(email="john@example.com", password="password123"):
        return client.post("/login", data={"email": email, "password": password})

    return _login
