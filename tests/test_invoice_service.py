from __future__ import annotations

from decimal import Decimal

import pytest

import billing.persistence.pg as pg
from billing.core.errors import InvalidInput, NotFound, ReferenceNotFound
from billing.domain.catalog.service import create_item, delete_item, update_item
from billing.domain.invoices.service import get_invoice, list_invoices, submit_invoice
from billing.persistence.stores import InvoiceStore


def _invoice_count() -> int:
    with pg.session_scope() as s:
        return InvoiceStore(s).count()


def test_submit_and_read_back(catalog):
    with pg.session_scope() as s:
        created = submit_invoice(
            s,
            "Acme Ltd",
            [{"itemId": catalog["A"], "quantity": 2}, {"itemId": catalog["B"], "quantity": 1}],
        )

    with pg.session_scope() as s:
        view = get_invoice(s, created.id)

    assert view.invoice.customer_name == "Acme Ltd"
    assert view.invoice.total_amount == Decimal("25")
    assert [(lv.line.item_id, lv.line.quantity, lv.line.price) for lv in view.lines] == [
        (catalog["A"], 2, Decimal("10")),
        (catalog["B"], 1, Decimal("5")),
    ]
    assert [lv.item.name for lv in view.lines] == ["Widget", "Gadget"]


def test_empty_items_persists_nothing(catalog):
    with pytest.raises(InvalidInput):
        with pg.session_scope() as s:
            submit_invoice(s, "Acme", [])
    assert _invoice_count() == 0


def test_unknown_item_persists_nothing(catalog):
    with pg.session_scope() as s:
        submit_invoice(s, "First", [{"itemId": catalog["A"], "quantity": 1}])
    before = _invoice_count()

    with pytest.raises(ReferenceNotFound):
        with pg.session_scope() as s:
            submit_invoice(
                s,
                "Acme",
                [{"itemId": catalog["A"], "quantity": 1}, {"itemId": "no-such-item", "quantity": 1}],
            )

    assert _invoice_count() == before == 1


def test_deleting_item_keeps_frozen_price_and_total(catalog):
    with pg.session_scope() as s:
        created = submit_invoice(s, "Acme", [{"itemId": catalog["A"], "quantity": 3}])

    with pg.session_scope() as s:
        delete_item(s, catalog["A"])

    with pg.session_scope() as s:
        view = get_invoice(s, created.id)

    assert view.invoice.total_amount == Decimal("30")
    assert view.lines[0].line.price == Decimal("10")
    assert view.lines[0].item is None


def test_catalog_price_change_does_not_drift_invoice(catalog):
    with pg.session_scope() as s:
        created = submit_invoice(s, "Acme", [{"itemId": catalog["B"], "quantity": 2}])

    with pg.session_scope() as s:
        update_item(s, catalog["B"], {"price": Decimal("99.00")})

    with pg.session_scope() as s:
        view = get_invoice(s, created.id)

    assert view.invoice.total_amount == Decimal("10")
    assert view.lines[0].line.price == Decimal("5")
    assert view.lines[0].item.price == Decimal("99.00")


def test_get_missing_invoice_raises_not_found(session):
    with pytest.raises(NotFound):
        get_invoice(session, "missing")


def test_list_invoices_newest_first(catalog):
    with pg.session_scope() as s:
        first = submit_invoice(s, "First", [{"itemId": catalog["A"], "quantity": 1}])
    with pg.session_scope() as s:
        second = submit_invoice(s, "Second", [{"itemId": catalog["B"], "quantity": 1}])

    with pg.session_scope() as s:
        ids = [inv.id for inv in list_invoices(s)]

    assert ids == [second.id, first.id]


def test_large_total_reads_back_exactly(session):
    big = create_item(session, "Big", Decimal("9999999999.99"))
    created = submit_invoice(session, "Acme", [{"itemId": big.id, "quantity": 123457}])
    session.commit()

    with pg.session_scope() as s:
        view = get_invoice(s, created.id)

    assert created.total_amount == Decimal("1234569999998765.43")
    assert view.invoice.total_amount == created.total_amount
    assert view.lines[0].line.price == Decimal("9999999999.99")


def test_padded_customer_name_is_stored_as_given(catalog):
    with pg.session_scope() as s:
        created = submit_invoice(s, "  Acme Ltd ", [{"itemId": catalog["A"], "quantity": 1}])

    with pg.session_scope() as s:
        assert get_invoice(s, created.id).invoice.customer_name == "  Acme Ltd "


def test_item_price_above_column_range_rejected(session):
    with pytest.raises(InvalidInput, match="must not exceed"):
        create_item(session, "Too big", Decimal("10000000000.00"))
