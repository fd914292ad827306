from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from billing.core.errors import InvalidInput, NotFound
from billing.domain.customers.aggregates import Customer
from billing.persistence.stores import CustomerStore


def create_customer(session: Session, name: str, contact: str | None = None, address: str | None = None) -> Customer:
    if not name or not name.strip():
        raise InvalidInput("Customer name is required")
    customer = Customer(id=str(uuid.uuid4()), name=name.strip(), contact=contact, address=address)
    return CustomerStore(session).save(customer)


def list_customers(session: Session) -> list[Customer]:
    return CustomerStore(session).find_all()


def find_customer(session: Session, customer_id: str) -> Customer:
    customer = CustomerStore(session).find(customer_id)
    if customer is None:
        raise NotFound("Customer not found")
    return customer
