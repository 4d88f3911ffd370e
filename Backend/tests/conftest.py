import os

# must be set before isoyard.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEFAULT_ADMIN_ID"] = "admin"
os.environ["DEFAULT_ADMIN_PASSWORD"] = "admin"

import pytest
from fastapi.testclient import TestClient

from isoyard.database import Base, engine, init_db, SessionLocal
from isoyard.main import app

ZONES = [
    {"id": "Z-01", "name": "A區", "capacity": 35},
    {"id": "Z-02", "name": "B區", "capacity": 40},
    {"id": "Z-03", "name": "C區", "capacity": 2},
]


def login(client, user_id, password):
    res = client.post("/api/auth/login", json={"user_id": user_id, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['data']['token']}"}


def make_user(client, admin_headers, user_id, role, is_super=False, password="secret"):
    res = client.post("/api/users", headers=admin_headers,
                      json={"id": user_id, "name": user_id.title(), "password": password,
                            "role": role, "is_super": is_super})
    assert res.status_code == 201, res.text
    return login(client, user_id, password)


def gate_in(client, headers, **fields):
    body = {"id": "TNKU1234567", "content": "ACETONE", "zone": "Z-01",
            "total_weight": 28000, "head_weight": 0, "empty_weight": 3500}
    body.update(fields)
    return client.post("/api/inventory/gate-in", headers=headers, json=body)


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_headers(client):
    return login(client, "admin", "admin")


@pytest.fixture
def op_headers(client, admin_headers):
    return make_user(client, admin_headers, "operator1", "op")


@pytest.fixture
def view_headers(client, admin_headers):
    return make_user(client, admin_headers, "viewer1", "view")


@pytest.fixture
def zones(client, admin_headers):
    res = client.put("/api/zones", headers=admin_headers, json={"zones": ZONES})
    assert res.status_code == 200, res.text
    return ZONES
