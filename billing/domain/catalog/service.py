from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy.orm import Session

from billing.core.errors import InvalidInput, NotFound
from billing.domain.catalog.aggregates import MAX_ITEM_PRICE, Item
from billing.persistence.stores import ItemStore

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def _clean_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput("Item name is required")
    return name.strip()


def _clean_price(price: Any) -> Decimal:
    if isinstance(price, bool):
        raise InvalidInput("Item price must be a number")
    try:
        value = Decimal(str(price))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInput("Item price must be a number") from exc
    if not value.is_finite() or value < 0:
        raise InvalidInput("Item price must be a non-negative number")
    if value != value.quantize(_CENTS):
        raise InvalidInput("Item price must have at most two decimal places")
    if value > MAX_ITEM_PRICE:
        raise InvalidInput(f"Item price must not exceed {MAX_ITEM_PRICE}")
    return value.quantize(_CENTS)


def find_item(session: Session, item_id: str) -> Item:
    item = ItemStore(session).find(item_id)
    if item is None:
        raise NotFound("Item not found")
    return item


def find_all_items(session: Session) -> list[Item]:
    return ItemStore(session).find_all()


def create_item(session: Session, name: Any, price: Any, description: str | None = None) -> Item:
    item = Item(id=str(uuid.uuid4()), name=_clean_name(name), price=_clean_price(price), description=description)
    saved = ItemStore(session).save(item)
    logger.info("item created: item_id=%s name=%s price=%s", saved.id, saved.name, saved.price, extra={"item_id": saved.id})
    return saved


def update_item(session: Session, item_id: str, changes: dict[str, Any]) -> Item:
    item = find_item(session, item_id)
    updates: dict[str, Any] = {}
    if "name" in changes and changes["name"] is not None:
        updates["name"] = _clean_name(changes["name"])
    if "price" in changes and changes["price"] is not None:
        updates["price"] = _clean_price(changes["price"])
    if "description" in changes:
        updates["description"] = changes["description"]

    saved = ItemStore(session).save(replace(item, **updates))
    logger.info("item updated: item_id=%s fields=%s", saved.id, sorted(updates), extra={"item_id": saved.id})
    return saved


def delete_item(session: Session, item_id: str) -> None:
    # Invoices keep their own copy of the price, so nothing else is touched.
    if not ItemStore(session).delete_by_id(item_id):
        raise NotFound("Item not found")
    logger.info("item deleted: item_id=%s", item_id, extra={"item_id": item_id})
