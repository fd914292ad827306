from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Item:
    id: str
    name: str
    price: Decimal
    description: str | None = None


# Largest value the items.price Numeric(12, 2) column holds.
MAX_ITEM_PRICE = Decimal("9999999999.99")
