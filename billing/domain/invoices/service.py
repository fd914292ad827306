from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from billing.core.errors import BillingError, NotFound
from billing.domain.catalog.aggregates import Item
from billing.domain.invoices.aggregates import Invoice, InvoiceLineView, InvoiceView
from billing.domain.invoices.aggregator import create_invoice
from billing.persistence.stores import InvoiceStore, ItemStore, Store

logger = logging.getLogger(__name__)


def submit_invoice(session: Session, customer_name: Any, requested_lines: Any) -> Invoice:
    try:
        invoice = create_invoice(customer_name, requested_lines, items=ItemStore(session))
    except BillingError as exc:
        logger.info("invoice rejected: %s", exc.message, extra={"error_code": exc.code})
        raise

    saved = InvoiceStore(session).save(invoice)
    logger.info(
        "invoice created: invoice_id=%s lines=%s total=%s",
        saved.id,
        len(saved.items),
        saved.total_amount,
        extra={"invoice_id": saved.id},
    )
    return saved


def get_invoice(session: Session, invoice_id: str) -> InvoiceView:
    invoice = InvoiceStore(session).find(invoice_id)
    if invoice is None:
        raise NotFound("Invoice not found")

    items: Store[Item] = ItemStore(session)
    cache: dict[str, Item | None] = {}
    lines: list[InvoiceLineView] = []
    for line in invoice.items:
        if line.item_id not in cache:
            cache[line.item_id] = items.find(line.item_id)
        lines.append(InvoiceLineView(line=line, item=cache[line.item_id]))
    return InvoiceView(invoice=invoice, lines=lines)


def list_invoices(session: Session) -> list[Invoice]:
    return InvoiceStore(session).find_all()
