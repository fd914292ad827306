from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from billing.api.utils import invoice_summary_payload, invoice_view_payload
from billing.core.errors import InvalidInput
from billing.core.security import get_current_user
from billing.domain.invoices.service import get_invoice, list_invoices, submit_invoice
from billing.persistence.pg import get_session

router = APIRouter(tags=["invoices"], dependencies=[Depends(get_current_user)])


@router.post("/api/invoices")
def create_invoice_route(payload: Any = Body(default=None), session: Session = Depends(get_session)):
    # The body is validated by the aggregator so error messages stay stable
    # ("Items must be an array", "Item with ID <x> not found").
    if not isinstance(payload, dict):
        raise InvalidInput("request body must be a JSON object")

    invoice = submit_invoice(session, payload.get("customerName"), payload.get("items"))
    location = f"/invoices/{invoice.id}"
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"invoiceId": invoice.id, "location": location},
        headers={"Location": location},
    )


@router.get("/invoices")
def list_invoices_route(session: Session = Depends(get_session)):
    invoices = list_invoices(session)
    return {"count": len(invoices), "invoices": [invoice_summary_payload(inv) for inv in invoices]}


@router.get("/invoices/{invoice_id}")
def get_invoice_route(invoice_id: str, session: Session = Depends(get_session)):
    return {"view": "invoice", "invoice": invoice_view_payload(get_invoice(session, invoice_id))}
