from datetime import timedelta
from decimal import Decimal

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


def create_client(client: TestClient, token: str, name: str = "Acme Corp") -> int:
    resp = client.post(
        "/clients",
        json={"name": name, "email": "ap@acme.example.com", "phone": "555-0100"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 201
    return resp.json()["id"]


def create_invoice(client: TestClient, token: str, **payload) -> dict:
    resp = client.post("/invoices", json=payload, headers=auth_headers(token))
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_invoice_generates_number_and_totals():
    client = TestClient(app)
    token = register_and_login(client, "inv1@example.com", "secret")
    client_id = create_client(client, token)

    data = create_invoice(
        client,
        token,
        client_id=client_id,
        amount="200.00",
        tax_amount="16.00",
        shipping_amount="9.50",
        line_items=[
            {"description": "Design", "quantity": "2", "unit_price": "75.00"},
            {"description": "Review", "unit_price": "50.00"},
        ],
    )

    year = utc_today().year
    assert data["invoice_number"] == f"INV-{year}-0001"
    assert data["status"] == "draft"
    assert data["type"] == "one-time"
    assert data["client_name"] == "Acme Corp"
    assert data["client_phone"] == "555-0100"
    assert Decimal(data["total_amount"]) == Decimal("225.50")
    assert Decimal(data["balance_due"]) == Decimal("225.50")
    assert Decimal(data["line_items"][0]["line_total"]) == Decimal("150.00")
    assert data["issue_date"] == utc_today().isoformat()
    assert data["due_date"] == (utc_today() + timedelta(days=30)).isoformat()

    second = create_invoice(client, token, client_id=client_id, amount="10.00")
    assert second["invoice_number"] == f"INV-{year}-0002"


def test_due_date_follows_payment_terms():
    client = TestClient(app)
    token = register_and_login(client, "terms@example.com", "secret")
    client_id = create_client(client, token)

    data = create_invoice(
        client, token, client_id=client_id, amount="10.00", issue_date="2024-05-01", payment_terms="net_15"
    )
    assert data["due_date"] == "2024-05-16"
    assert data["payment_terms"] == "net_15"


def test_supplied_number_is_kept_and_duplicates_rejected():
    client = TestClient(app)
    token = register_and_login(client, "dup@example.com", "secret")
    client_id = create_client(client, token)

    data = create_invoice(client, token, client_id=client_id, amount="10.00", invoice_number="INV-2020-0100")
    assert data["invoice_number"] == "INV-2020-0100"

    resp = client.post(
        "/invoices",
        json={"client_id": client_id, "amount": "10.00", "invoice_number": "INV-2020-0100"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 409


def test_invalid_invoice_requests():
    client = TestClient(app)
    token = register_and_login(client, "bad@example.com", "secret")
    client_id = create_client(client, token)

    missing_client = client.post("/invoices", json={"client_id": 999, "amount": "1.00"}, headers=auth_headers(token))
    assert missing_client.status_code == 404

    due_before_issue = client.post(
        "/invoices",
        json={"client_id": client_id, "amount": "1.00", "issue_date": "2024-05-10", "due_date": "2024-05-01"},
        headers=auth_headers(token),
    )
    assert due_before_issue.status_code == 400

    bad_terms = client.post(
        "/invoices",
        json={"client_id": client_id, "amount": "1.00", "payment_terms": "net_45"},
        headers=auth_headers(token),
    )
    assert bad_terms.status_code == 422

    bad_line = client.post(
        "/invoices",
        json={"client_id": client_id, "amount": "1.00", "line_items": [{"description": "x", "quantity": 0, "unit_price": 1}]},
        headers=auth_headers(token),
    )
    assert bad_line.status_code == 422


def test_list_invoices_filters_and_sorting():
    client = TestClient(app)
    token = register_and_login(client, "list@example.com", "secret")
    acme = create_client(client, token, "Acme Corp")
    globex = create_client(client, token, "Globex")
    create_invoice(client, token, client_id=acme, amount="30.00", status="sent")
    create_invoice(client, token, client_id=acme, amount="10.00")
    create_invoice(client, token, client_id=globex, amount="20.00")

    by_client = client.get("/invoices", params={"client_id": acme}, headers=auth_headers(token)).json()
    assert len(by_client) == 2

    sent = client.get("/invoices", params={"status": "sent"}, headers=auth_headers(token)).json()
    assert [Decimal(row["amount"]) for row in sent] == [Decimal("30.00")]

    ordered = client.get(
        "/invoices", params={"sort_by": "total_amount", "sort_order": "asc"}, headers=auth_headers(token)
    ).json()
    assert [Decimal(row["total_amount"]) for row in ordered] == [Decimal("10.00"), Decimal("20.00"), Decimal("30.00")]

    bad_sort = client.get("/invoices", params={"sort_by": "nope"}, headers=auth_headers(token))
    assert bad_sort.status_code == 400


def test_update_invoice_recalculates_totals():
    client = TestClient(app)
    token = register_and_login(client, "upd@example.com", "secret")
    client_id = create_client(client, token)
    invoice = create_invoice(client, token, client_id=client_id, amount="100.00")

    resp = client.patch(
        f"/invoices/{invoice['id']}",
        json={"amount": "120.00", "tax_amount": "5.00", "notes": "Updated"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert Decimal(data["total_amount"]) == Decimal("125.00")
    assert data["status"] == "draft"
    assert data["notes"] == "Updated"

    resp = client.patch(f"/invoices/{invoice['id']}", json={"status": "sent"}, headers=auth_headers(token))
    assert resp.json()["status"] == "sent"


def test_refresh_overdue_marks_sent_invoices_past_due():
    client = TestClient(app)
    token = register_and_login(client, "overdue@example.com", "secret")
    client_id = create_client(client, token)
    past_due = create_invoice(
        client, token, client_id=client_id, amount="10.00", status="sent", issue_date="2020-01-01", due_date="2020-01-31"
    )
    draft = create_invoice(
        client, token, client_id=client_id, amount="10.00", issue_date="2020-01-01", due_date="2020-01-31"
    )
    create_invoice(client, token, client_id=client_id, amount="10.00", status="sent")

    resp = client.post("/invoices/refresh-overdue", headers=auth_headers(token))
    assert resp.status_code == 200
    assert resp.json() == {"updated": 1}
    assert client.get(f"/invoices/{past_due['id']}", headers=auth_headers(token)).json()["status"] == "overdue"
    assert client.get(f"/invoices/{draft['id']}", headers=auth_headers(token)).json()["status"] == "draft"


def test_next_number_preview_does_not_consume_numbers():
    client = TestClient(app)
    token = register_and_login(client, "preview@example.com", "secret")
    client_id = create_client(client, token)
    year = utc_today().year

    first = client.get("/invoices/next-number", headers=auth_headers(token)).json()
    second = client.get("/invoices/next-number", headers=auth_headers(token)).json()
    assert first == second == {"document_type": "invoice", "next_number": f"INV-{year}-0001"}

    create_invoice(client, token, client_id=client_id, amount="10.00")
    assert client.get("/invoices/next-number", headers=auth_headers(token)).json()["next_number"] == f"INV-{year}-0002"


def test_delete_invoice():
    client = TestClient(app)
    token = register_and_login(client, "del@example.com", "secret")
    client_id = create_client(client, token)
    invoice = create_invoice(client, token, client_id=client_id, amount="10.00")

    resp = client.delete(f"/invoices/{invoice['id']}", headers=auth_headers(token))
    assert resp.status_code == 200
    assert client.get(f"/invoices/{invoice['id']}", headers=auth_headers(token)).status_code == 404
    assert client.get("/invoices/999", headers=auth_headers(token)).status_code == 404


def test_update_invoice_ignores_nulls_for_required_fields():
    client = TestClient(app)
    token = register_and_login(client, "nulls@example.com", "secret")
    client_id = create_client(client, token)
    invoice = create_invoice(
        client, token, client_id=client_id, amount="100.00", issue_date="2024-03-01", due_date="2024-03-31"
    )

    resp = client.patch(f"/invoices/{invoice['id']}", json={"due_date": None}, headers=auth_headers(token))
    assert resp.status_code == 200
    assert resp.json()["due_date"] == "2024-03-31"

    resp = client.patch(
        f"/invoices/{invoice['id']}", json={"amount": None, "notes": "Kept amount"}, headers=auth_headers(token)
    )
    assert resp.status_code == 200
    data = resp.json()
    assert Decimal(data["amount"]) == Decimal("100.00")
    assert Decimal(data["total_amount"]) == Decimal("100.00")
    assert data["notes"] == "Kept amount"

    resp = client.patch(f"/invoices/{invoice['id']}", json={"notes": None}, headers=auth_headers(token))
    assert resp.status_code == 200
    assert resp.json()["notes"] is None


def test_delete_invoice_with_payments_is_rejected():
    client = TestClient(app)
    token = register_and_login(client, "delpaid@example.com", "secret")
    client_id = create_client(client, token)
    invoice = create_invoice(client, token, client_id=client_id, amount="50.00", status="sent")
    payment = client.post(
        "/payments", json={"invoice_id": invoice["id"], "amount": "20.00"}, headers=auth_headers(token)
    ).json()

    resp = client.delete(f"/invoices/{invoice['id']}", headers=auth_headers(token))
    assert resp.status_code == 409
    assert client.get(f"/payments/{payment['id']}", headers=auth_headers(token)).json()["invoice_id"] == invoice["id"]

    client.delete(f"/payments/{payment['id']}", headers=auth_headers(token))
    assert client.delete(f"/invoices/{invoice['id']}", headers=auth_headers(token)).status_code == 200
