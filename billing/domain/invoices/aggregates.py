from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from billing.domain.catalog.aggregates import Item


@dataclass(frozen=True)
class InvoiceLine:
    item_id: str
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Invoice:
    id: str
    customer_name: str
    items: tuple[InvoiceLine, ...]
    total_amount: Decimal
    date: datetime


@dataclass
class InvoiceLineView:
    line: InvoiceLine
    # None once the referenced catalog item has been deleted.
    item: Item | None = None


@dataclass
class InvoiceView:
    invoice: Invoice
    lines: list[InvoiceLineView] = field(default_factory=list)
