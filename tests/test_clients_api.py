import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_client(client: TestClient, token: str, name: str = "Acme Corp", email: str = "ap@acme.example.com") -> dict:
    resp = client.post(
        "/clients",
        json={"name": name, "email": email, "address": "1 Main St", "city": "Springfield", "state": "IL", "zip_code": "62701"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 201
    return resp.json()


def test_create_and_get_client():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com", "secret")
    created = create_client(client, token)
    assert created["country"] == "US"

    resp = client.get(f"/clients/{created['id']}", headers=auth_headers(token))
    assert resp.status_code == 200
    assert resp.json()["name"] == "Acme Corp"


def test_invalid_email_rejected():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com", "secret")
    resp = client.post("/clients", json={"name": "Bad", "email": "not-an-email"}, headers=auth_headers(token))
    assert resp.status_code == 422


def test_list_clients_with_search():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com", "secret")
    create_client(client, token, "Acme Corp", "ap@acme.example.com")
    create_client(client, token, "Globex", "billing@globex.example.com")

    resp = client.get("/clients", params={"search": "glob"}, headers=auth_headers(token))
    assert resp.status_code == 200
    assert [row["name"] for row in resp.json()] == ["Globex"]

    resp = client.get("/clients", headers=auth_headers(token))
    assert [row["name"] for row in resp.json()] == ["Acme Corp", "Globex"]


def test_update_client_keeps_invoice_snapshot():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com", "secret")
    created = create_client(client, token)
    invoice = client.post(
        "/invoices", json={"client_id": created["id"], "amount": "100.00"}, headers=auth_headers(token)
    ).json()
    assert invoice["client_address"] == "1 Main St, Springfield, IL 62701"

    resp = client.put(f"/clients/{created['id']}", json={"name": "Acme Holdings"}, headers=auth_headers(token))
    assert resp.status_code == 200
    assert resp.json()["name"] == "Acme Holdings"
    assert resp.json()["email"] == "ap@acme.example.com"

    invoice_after = client.get(f"/invoices/{invoice['id']}", headers=auth_headers(token)).json()
    assert invoice_after["client_name"] == "Acme Corp"


def test_delete_client_refused_while_invoices_exist():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com", "secret")
    created = create_client(client, token)
    client.post("/invoices", json={"client_id": created["id"], "amount": "10.00"}, headers=auth_headers(token))

    resp = client.delete(f"/clients/{created['id']}", headers=auth_headers(token))
    assert resp.status_code == 409


def test_delete_client_without_invoices():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com", "secret")
    created = create_client(client, token)

    resp = client.delete(f"/clients/{created['id']}", headers=auth_headers(token))
    assert resp.status_code == 200
    assert resp.json() == {"status": "deleted", "id": created["id"]}
    assert client.get(f"/clients/{created['id']}", headers=auth_headers(token)).status_code == 404


def test_client_sub_resources():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com", "secret")
    created = create_client(client, token)
    client.post("/invoices", json={"client_id": created["id"], "amount": "10.00"}, headers=auth_headers(token))
    client.post(
        "/recurring-templates",
        json={"name": "Hosting", "client_id": created["id"], "amount": "25.00", "next_invoice_date": "2030-01-01"},
        headers=auth_headers(token),
    )

    invoices = client.get(f"/clients/{created['id']}/invoices", headers=auth_headers(token))
    templates = client.get(f"/clients/{created['id']}/recurring-templates", headers=auth_headers(token))
    assert len(invoices.json()) == 1
    assert [row["name"] for row in templates.json()] == ["Hosting"]
    assert client.get("/clients/999/invoices", headers=auth_headers(token)).status_code == 404
