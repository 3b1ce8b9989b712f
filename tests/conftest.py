import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from main import app
from core.database import Base, get_db
from core.security import get_current_user

# Ensure models are registered with SQLAlchemy metadata
import models.user  # noqa: F401
import models.booking  # noqa: F401
import models.completed_file  # noqa: F401
import models.master_data  # noqa: F401
import models.local_charges  # noqa: F401
import models.booking_request  # noqa: F401


class MockUser:
    def __init__(self, role: str = "admin", permissions=None, username: str = "test-user") -> None:
        self.id = "00000000000000000000000000000001"
        self.role = role
        self.permissions = list(permissions or [])
        self.username = username
        self.active = True


@pytest.fixture(scope="function")
def db_session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_current_user] = lambda: MockUser("admin")

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    """Swap the signed-in mock user for the rest of the test."""
    def _as_user(role: str = "user", permissions=None, username: str = "desk-user"):
        app.dependency_overrides[get_current_user] = lambda: MockUser(role, permissions, username)
    return _as_user


def booking_payload(booking_no: str = "MAEU123456", **overrides) -> dict:
    payload = {
        "location": "MUMBAI",
        "customer": "ACME EXPORTS",
        "line": "MAERSK",
        "pol": "NHAVA SHEVA",
        "pod": "JEBEL ALI",
        "fpod": "JEBEL ALI",
        "vessel": "MSC AURORA",
        "voyage": "123E",
        "booking_no": booking_no,
        "booking_date": "2025-06-01",
        "etd": "2025-06-10",
        "equipment": [{"type": "40HC", "qty": 2}],
        "port_cut_off": "06061800",
        "si_cut_off": "05061200",
        "add_missing_to_master": False,
    }
    payload.update(overrides)
    return payload


def create_entry(client: TestClient, booking_no: str = "MAEU123456", **overrides) -> dict:
    response = client.post("/api/entries/", json=booking_payload(booking_no, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


def toggle(client: TestClient, entry_id: str, flag: str, value: bool = True, **extra):
    return client.post(f"/api/entries/{entry_id}/flags", json={"flag": flag, "value": value, **extra})
