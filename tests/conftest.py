import os

import pytest

# Set testing environment before the app is imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from fastapi.testclient import TestClient

from turfbook.main import app
from turfbook.core.database import redis_client
from turfbook.core.security import UserRole
from turfbook.models.user import User
from tests.utils import register, login


@pytest.fixture
def client():
    redis_client.flushdb()
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
        app.state.db.drop_all()


@pytest.fixture
def db_session(client):
    session = app.state.db.session()
    yield session
    session.close()


@pytest.fixture
def user_token(client):
    response = register(client)
    assert response.status_code == 201
    return response.json()["token"]


@pytest.fixture
def other_token(client):
    response = register(client, name="bob", value="+15550100", type="phone")
    assert response.status_code == 201
    return response.json()["token"]


@pytest.fixture
def admin_token(client, db_session):
    register(client, name="admin", value="admin@example.com")
    admin = db_session.query(User).filter(User.name == "admin").first()
    admin.role = UserRole.ADMIN
    db_session.commit()

    # The role is baked into the token, so log in again after promotion
    response = login(client, value="admin@example.com")
    assert response.status_code == 200
    return response.json()["token"]
