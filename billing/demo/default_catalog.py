from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from billing.core.config import get_settings
from billing.domain.catalog.service import create_item, find_all_items
from billing.domain.users.service import register_user
from billing.persistence.stores import UserStore

logger = logging.getLogger(__name__)

DEFAULT_CATALOG: list[dict[str, Any]] = [
    {"name": "Notebook A5", "price": Decimal("3.50"), "description": "80 pages, ruled"},
    {"name": "Ballpoint pen", "price": Decimal("0.90"), "description": "Blue ink"},
    {"name": "Stapler", "price": Decimal("12.00"), "description": None},
    {"name": "Printer paper", "price": Decimal("5.25"), "description": "500 sheets, A4"},
]


def seed_default_catalog(session: Session) -> dict[str, Any]:
    settings = get_settings()
    created_user = False
    if UserStore(session).find_by_username(settings.demo_username) is None:
        register_user(session, settings.demo_username, settings.demo_password, role="admin")
        created_user = True

    created_items: list[str] = []
    if not find_all_items(session):
        for entry in DEFAULT_CATALOG:
            item = create_item(session, entry["name"], entry["price"], entry["description"])
            created_items.append(item.id)

    seeded_now = created_user or bool(created_items)
    logger.info("demo seed: user_created=%s items_created=%s", created_user, len(created_items))
    return {
        "username": settings.demo_username,
        "user_created": created_user,
        "item_ids": created_items,
        "seeded_now": seeded_now,
    }
