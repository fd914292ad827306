from __future__ import annotations

import logging

from fastapi import FastAPI

from billing.api.error_handlers import register_error_handlers
from billing.api.routes_auth import router as auth_router
from billing.api.routes_customers import router as customers_router
from billing.api.routes_invoices import router as invoices_router
from billing.api.routes_items import router as items_router
from billing.core.config import get_settings
from billing.core.logging import configure_logging
from billing.demo import seed_default_catalog
from billing.persistence.pg import init_db, session_scope

configure_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(title=settings.app_name)


@app.on_event("startup")
def on_startup() -> None:
    init_db()
    if settings.bootstrap_demo_on_startup:
        with session_scope() as session:
            result = seed_default_catalog(session)
        logger.info(
            "demo catalog ready: username=%s seeded_now=%s",
            result.get("username"),
            result.get("seeded_now"),
        )


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


register_error_handlers(app)

app.include_router(auth_router)
app.include_router(items_router)
app.include_router(customers_router)
app.include_router(invoices_router)
