from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from billing.api.schemas import CustomerCreateRequest
from billing.api.utils import customer_payload
from billing.core.security import get_current_user
from billing.domain.customers.service import create_customer, find_customer, list_customers
from billing.persistence.pg import get_session

router = APIRouter(tags=["customers"], dependencies=[Depends(get_current_user)])


@router.get("/api/customers")
def get_customers(session: Session = Depends(get_session)):
    customers = list_customers(session)
    return {"count": len(customers), "customers": [customer_payload(c) for c in customers]}


@router.post("/api/customers", status_code=status.HTTP_201_CREATED)
def add_customer(body: CustomerCreateRequest, session: Session = Depends(get_session)):
    customer = create_customer(session, name=body.name, contact=body.contact, address=body.address)
    return customer_payload(customer)


@router.get("/api/customers/{customer_id}")
def get_customer(customer_id: str, session: Session = Depends(get_session)):
    return customer_payload(find_customer(session, customer_id))
