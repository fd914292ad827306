from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from billing.domain.catalog.aggregates import Item
from billing.domain.customers.aggregates import Customer
from billing.domain.invoices.aggregates import Invoice, InvoiceView
from billing.domain.users.aggregates import User


def money(value: Decimal) -> str:
    return str(value)


def isoformat_utc(value: datetime) -> str:
    # SQLite drops tzinfo on the way back; stored values are always UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def item_payload(item: Item) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "price": money(item.price),
        "description": item.description,
    }


def customer_payload(customer: Customer) -> dict:
    return {
        "id": customer.id,
        "name": customer.name,
        "contact": customer.contact,
        "address": customer.address,
    }


def user_payload(user: User) -> dict:
    return {"id": user.id, "username": user.username, "role": user.role}


def invoice_summary_payload(invoice: Invoice) -> dict:
    return {
        "id": invoice.id,
        "customerName": invoice.customer_name,
        "date": isoformat_utc(invoice.date),
        "lineCount": len(invoice.items),
        "totalAmount": money(invoice.total_amount),
    }


def invoice_view_payload(view: InvoiceView) -> dict:
    invoice = view.invoice
    return {
        "id": invoice.id,
        "customerName": invoice.customer_name,
        "date": isoformat_utc(invoice.date),
        "totalAmount": money(invoice.total_amount),
        "items": [
            {
                "itemId": line_view.line.item_id,
                "quantity": line_view.line.quantity,
                "price": money(line_view.line.price),
                "subtotal": money(line_view.line.subtotal),
                "item": item_payload(line_view.item) if line_view.item is not None else None,
            }
            for line_view in view.lines
        ],
    }
