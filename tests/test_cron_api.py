from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from backend.app.core.time import utc_today
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


def test_cron_health_is_public():
    client = TestClient(app)
    resp = client.get("/cron/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["timestamp"]


def test_cron_run_requires_token():
    client = TestClient(app)
    assert client.post("/cron/recurring-invoices").status_code in (401, 403)


def test_cron_recurring_run_with_catch_up():
    client = TestClient(app)
    token = register_and_login(client, "cron@example.com", "secret")
    client_id = client.post(
        "/clients", json={"name": "Acme Corp", "email": "ap@acme.example.com"}, headers=auth_headers(token)
    ).json()["id"]
    client.post(
        "/recurring-templates",
        json={
            "name": "Weekly cleaning",
            "client_id": client_id,
            "amount": "80.00",
            "frequency": "weekly",
            "payment_terms": "due_on_receipt",
            "next_invoice_date": (utc_today() - timedelta(days=14)).isoformat(),
        },
        headers=auth_headers(token),
    )

    resp = client.post("/cron/recurring-invoices", params={"catch_up": True}, headers=auth_headers(token))
    assert resp.status_code == 200
    data = resp.json()
    assert data["processed"] == 3
    assert len(data["invoice_ids"]) == 3
    assert data["errors"] == []

    again = client.post("/cron/recurring-invoices", headers=auth_headers(token)).json()
    assert again["processed"] == 0


def test_cron_overdue_run():
    client = TestClient(app)
    token = register_and_login(client, "overdue@example.com", "secret")
    client_id = client.post(
        "/clients", json={"name": "Acme Corp", "email": "ap@acme.example.com"}, headers=auth_headers(token)
    ).json()["id"]
    client.post(
        "/invoices",
        json={"client_id": client_id, "amount": "5.00", "status": "sent", "issue_date": "2020-01-01", "due_date": "2020-01-02"},
        headers=auth_headers(token),
    )

    resp = client.post("/cron/overdue-invoices", headers=auth_headers(token))
    assert resp.status_code == 200
    assert resp.json()["updated"] == 1
