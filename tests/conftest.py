# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from maintenance_app import user_service
from maintenance_app.auth import hash_password, token_for
from maintenance_app.database import get_db
from maintenance_app.main import create_app
from maintenance_app.models import Role, UserCreate
from maintenance_app.pdf_generator import get_pdf_renderer

PASSWORD = "secret123"

FAKE_PDF = b"%PDF-1.4\n% fake report\n%%EOF"


class FakeRenderer:
    """Stands in for the headless browser and remembers what it was given."""

    def __init__(self):
        self.documents = []

    def __call__(self, html):
        self.documents.append(html)
        return FAKE_PDF

    @property
    def last_html(self):
        return self.documents[-1]


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "maintenance-test.db")


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def app(db_path, renderer):
    app = create_app(database_path=db_path)
    app.dependency_overrides[get_pdf_renderer] = lambda: renderer
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def conn(client, db_path):
    # Depends on client so the schema exists
    conn = get_db(db_path)
    yield conn
    conn.close()


@pytest.fixture
def users(conn, password_hash):
    people = {
        "technician": UserCreate(name="Tess Technician", email="tess@example.com", password=PASSWORD, role=Role.TECHNICIAN),
        "technician2": UserCreate(name="Idle Technician", email="idle@example.com", password=PASSWORD, role=Role.TECHNICIAN),
        "supervisor": UserCreate(name="Sam Supervisor", email="sam@example.com", password=PASSWORD, role=Role.SUPERVISOR),
        "manager": UserCreate(name="Mona Manager", email="mona@example.com", password=PASSWORD, role=Role.MANAGER),
    }
    return {key: user_service.create_user(conn, data, password_hash) for key, data in people.items()}


@pytest.fixture
def headers(users):
    return {key: {"Authorization": f"Bearer {token_for(user)}"} for key, user in users.items()}


def equipment_payload(**overrides):
    payload = {
        "name": "Hydraulic Press",
        "type": "Press",
        "status": "operational",
        "nextMaintenanceDate": "2030-01-15T00:00:00Z",
    }
    payload.update(overrides)
    return payload


def work_order_payload(equipment_id, **overrides):
    payload = {
        "title": "Replace seals",
        "equipment": equipment_id,
        "priority": "high",
        "description": "Hydraulic fluid leaking from the main cylinder",
        "dueDate": "2030-02-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_equipment(client, headers):
    def _make(**overrides):
        response = client.post("/api/equipment", json=equipment_payload(**overrides), headers=headers["manager"])
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_work_order(client, headers, make_equipment):
    def _make(equipment_id=None, **overrides):
        if equipment_id is None:
            equipment_id = make_equipment()["_id"]
        response = client.post(
            "/api/work-orders", json=work_order_payload(equipment_id, **overrides), headers=headers["supervisor"]
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make
