from __future__ import annotations

from decimal import Decimal

import billing.persistence.pg as pg
from billing.persistence.stores import InvoiceStore


def _invoice_count() -> int:
    with pg.session_scope() as s:
        return InvoiceStore(s).count()


def test_create_then_fetch_invoice(auth_client, catalog):
    created = auth_client.post(
        "/api/invoices",
        json={
            "customerName": "Acme Ltd",
            "items": [{"itemId": catalog["A"], "quantity": 2}, {"itemId": catalog["B"], "quantity": 1}],
        },
    )
    assert created.status_code == 201
    invoice_id = created.json()["invoiceId"]
    assert created.headers["location"] == f"/invoices/{invoice_id}"

    fetched = auth_client.get(f"/invoices/{invoice_id}")
    assert fetched.status_code == 200
    invoice = fetched.json()["invoice"]
    assert invoice["id"] == invoice_id
    assert invoice["customerName"] == "Acme Ltd"
    assert Decimal(invoice["totalAmount"]) == Decimal("25")
    assert invoice["date"].endswith("Z")
    assert [line["itemId"] for line in invoice["items"]] == [catalog["A"], catalog["B"]]
    assert [Decimal(line["subtotal"]) for line in invoice["items"]] == [Decimal("20"), Decimal("5")]
    assert invoice["items"][0]["item"]["name"] == "Widget"


def test_items_must_be_an_array(auth_client, catalog):
    response = auth_client.post("/api/invoices", json={"customerName": "Acme", "items": "nope"})
    assert response.status_code == 400
    assert response.json()["error"] == "Items must be an array"
    assert response.json()["code"] == "invalid_input"

    missing = auth_client.post("/api/invoices", json={"customerName": "Acme"})
    assert missing.status_code == 400
    assert missing.json()["error"] == "Items must be an array"
    assert _invoice_count() == 0


def test_empty_items_rejected(auth_client, catalog):
    response = auth_client.post("/api/invoices", json={"customerName": "Acme", "items": []})
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_input"
    assert _invoice_count() == 0


def test_unknown_item_reports_id_and_stores_nothing(auth_client, catalog):
    response = auth_client.post(
        "/api/invoices",
        json={
            "customerName": "Acme",
            "items": [{"itemId": catalog["A"], "quantity": 1}, {"itemId": "ghost-id", "quantity": 1}],
        },
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Item with ID ghost-id not found", "code": "reference_not_found"}
    assert _invoice_count() == 0


def test_non_object_body_rejected(auth_client):
    response = auth_client.post("/api/invoices", json=[1, 2, 3])
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_input"


def test_missing_invoice_is_404(auth_client):
    response = auth_client.get("/invoices/does-not-exist")
    assert response.status_code == 404
    assert response.json()["error"] == "Invoice not found"


def test_deleted_item_shows_degraded_line(auth_client, catalog):
    created = auth_client.post(
        "/api/invoices",
        json={"customerName": "Acme", "items": [{"itemId": catalog["B"], "quantity": 4}]},
    )
    invoice_id = created.json()["invoiceId"]

    deleted = auth_client.post(f"/api/items/{catalog['B']}/delete")
    assert deleted.status_code == 200

    invoice = auth_client.get(f"/invoices/{invoice_id}").json()["invoice"]
    assert Decimal(invoice["totalAmount"]) == Decimal("20")
    assert Decimal(invoice["items"][0]["price"]) == Decimal("5")
    assert invoice["items"][0]["quantity"] == 4
    assert invoice["items"][0]["item"] is None


def test_invoice_index_lists_created_invoices(auth_client, catalog):
    for name in ("First", "Second"):
        auth_client.post(
            "/api/invoices",
            json={"customerName": name, "items": [{"itemId": catalog["A"], "quantity": 1}]},
        )

    payload = auth_client.get("/invoices").json()
    assert payload["count"] == 2
    assert {inv["customerName"] for inv in payload["invoices"]} == {"First", "Second"}


def test_invoice_routes_require_login(client, catalog):
    created = client.post(
        "/api/invoices",
        json={"customerName": "Acme", "items": [{"itemId": catalog["A"], "quantity": 1}]},
        follow_redirects=False,
    )
    assert created.status_code == 303
    assert created.headers["location"] == "/login"
    assert _invoice_count() == 0

    fetched = client.get("/invoices/anything", follow_redirects=False)
    assert fetched.status_code == 303
