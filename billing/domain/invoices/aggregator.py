from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Protocol

from billing.core.errors import InvalidInput, ReferenceNotFound
from billing.domain.catalog.aggregates import Item
from billing.domain.invoices.aggregates import Invoice, InvoiceLine


class ItemLookup(Protocol):
    def find(self, record_id: str) -> Item | None: ...


@dataclass(frozen=True)
class RequestedLine:
    item_id: str
    quantity: int


def _parse_customer_name(customer_name: Any) -> str:
    if not isinstance(customer_name, str) or not customer_name.strip():
        raise InvalidInput("customerName is required")
    return customer_name


def _parse_requested_line(index: int, raw: Any) -> RequestedLine:
    if not isinstance(raw, dict):
        raise InvalidInput(f"items[{index}] must be an object with itemId and quantity")

    item_id = raw.get("itemId")
    if item_id is None or (isinstance(item_id, str) and not item_id.strip()):
        raise InvalidInput(f"items[{index}].itemId is required")
    if not isinstance(item_id, (str, int)) or isinstance(item_id, bool):
        raise InvalidInput(f"items[{index}].itemId must be a string")

    quantity = raw.get("quantity")
    # bool is an int subclass; True must not count as a quantity of one.
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidInput(f"items[{index}].quantity must be a positive integer")

    return RequestedLine(item_id=str(item_id), quantity=quantity)


def parse_requested_lines(requested_lines: Any) -> list[RequestedLine]:
    if requested_lines is None or not isinstance(requested_lines, list):
        raise InvalidInput("Items must be an array")
    if not requested_lines:
        raise InvalidInput("Items must not be empty")
    return [_parse_requested_line(index, raw) for index, raw in enumerate(requested_lines)]


def _resolve_items(items: ItemLookup, requested: list[RequestedLine]) -> dict[str, Item]:
    resolved: dict[str, Item] = {}
    for line in requested:
        if line.item_id in resolved:
            continue
        found = items.find(line.item_id)
        if found is None:
            raise ReferenceNotFound(line.item_id)
        resolved[line.item_id] = found
    return resolved


def create_invoice(
    customer_name: Any,
    requested_lines: Any,
    items: ItemLookup,
    now: datetime | None = None,
) -> Invoice:
    """Price the requested lines against the catalog and build an unsaved invoice.

    Every input check runs before the first catalog lookup, and a single
    unresolvable item id fails the whole invoice. Prices are copied from the
    catalog at this moment; the returned lines keep the caller's order.
    """
    name = _parse_customer_name(customer_name)
    requested = parse_requested_lines(requested_lines)
    resolved = _resolve_items(items, requested)

    lines: list[InvoiceLine] = []
    total_amount = Decimal("0")
    for line in requested:
        price = Decimal(resolved[line.item_id].price)
        invoice_line = InvoiceLine(item_id=line.item_id, quantity=line.quantity, price=price)
        total_amount += invoice_line.subtotal
        lines.append(invoice_line)

    return Invoice(
        id=str(uuid.uuid4()),
        customer_name=name,
        items=tuple(lines),
        total_amount=total_amount,
        date=now or datetime.now(timezone.utc),
    )
