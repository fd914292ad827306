from __future__ import annotations

from decimal import Decimal
from typing import Protocol, TypeVar

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from billing.core.errors import InvalidInput
from billing.domain.catalog.aggregates import Item
from billing.domain.customers.aggregates import Customer
from billing.domain.invoices.aggregates import Invoice, InvoiceLine
from billing.domain.users.aggregates import User
from billing.persistence.models import CustomerModel, InvoiceModel, ItemModel, UserModel

T = TypeVar("T")


class Store(Protocol[T]):
    def find(self, record_id: str) -> T | None: ...

    def find_all(self) -> list[T]: ...

    def save(self, record: T) -> T: ...

    def delete_by_id(self, record_id: str) -> bool: ...


class ItemStore:
    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _to_record(row: ItemModel) -> Item:
        return Item(id=row.id, name=row.name, price=Decimal(row.price), description=row.description)

    def find(self, record_id: str) -> Item | None:
        row = self.session.get(ItemModel, str(record_id))
        return self._to_record(row) if row is not None else None

    def find_all(self) -> list[Item]:
        rows = self.session.scalars(select(ItemModel).order_by(ItemModel.name.asc(), ItemModel.id.asc())).all()
        return [self._to_record(row) for row in rows]

    def save(self, record: Item) -> Item:
        row = self.session.get(ItemModel, record.id)
        if row is None:
            row = ItemModel(id=record.id)
            self.session.add(row)
        row.name = record.name
        row.price = record.price
        row.description = record.description
        self.session.flush()
        return self._to_record(row)

    def delete_by_id(self, record_id: str) -> bool:
        row = self.session.get(ItemModel, str(record_id))
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True


class CustomerStore:
    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _to_record(row: CustomerModel) -> Customer:
        return Customer(id=row.id, name=row.name, contact=row.contact, address=row.address)

    def find(self, record_id: str) -> Customer | None:
        row = self.session.get(CustomerModel, str(record_id))
        return self._to_record(row) if row is not None else None

    def find_all(self) -> list[Customer]:
        rows = self.session.scalars(select(CustomerModel).order_by(CustomerModel.name.asc())).all()
        return [self._to_record(row) for row in rows]

    def save(self, record: Customer) -> Customer:
        row = self.session.get(CustomerModel, record.id)
        if row is None:
            row = CustomerModel(id=record.id)
            self.session.add(row)
        row.name = record.name
        row.contact = record.contact
        row.address = record.address
        self.session.flush()
        return self._to_record(row)

    def delete_by_id(self, record_id: str) -> bool:
        row = self.session.get(CustomerModel, str(record_id))
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True


class UserStore:
    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _to_record(row: UserModel) -> User:
        return User(id=row.id, username=row.username, password_hash=row.password_hash, role=row.role)

    def find(self, record_id: str) -> User | None:
        row = self.session.get(UserModel, str(record_id))
        return self._to_record(row) if row is not None else None

    def find_by_username(self, username: str) -> User | None:
        row = self.session.scalar(select(UserModel).where(UserModel.username == username))
        return self._to_record(row) if row is not None else None

    def find_all(self) -> list[User]:
        rows = self.session.scalars(select(UserModel).order_by(UserModel.username.asc())).all()
        return [self._to_record(row) for row in rows]

    def save(self, record: User) -> User:
        row = self.session.get(UserModel, record.id)
        if row is None:
            row = UserModel(id=record.id)
            self.session.add(row)
        row.username = record.username
        row.password_hash = record.password_hash
        row.role = record.role
        self.session.flush()
        return self._to_record(row)

    def delete_by_id(self, record_id: str) -> bool:
        row = self.session.get(UserModel, str(record_id))
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True


class InvoiceStore:
    """Append-only: invoices are written once and never updated or deleted."""

    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _to_record(row: InvoiceModel) -> Invoice:
        lines = tuple(
            InvoiceLine(item_id=line["item_id"], quantity=int(line["quantity"]), price=Decimal(line["price"]))
            for line in row.line_items
        )
        return Invoice(
            id=row.id,
            customer_name=row.customer_name,
            items=lines,
            total_amount=Decimal(row.total_amount),
            date=row.date,
        )

    def find(self, record_id: str) -> Invoice | None:
        row = self.session.get(InvoiceModel, str(record_id))
        return self._to_record(row) if row is not None else None

    def find_all(self) -> list[Invoice]:
        rows = self.session.scalars(select(InvoiceModel).order_by(desc(InvoiceModel.date), InvoiceModel.id)).all()
        return [self._to_record(row) for row in rows]

    def count(self) -> int:
        return int(self.session.scalar(select(func.count()).select_from(InvoiceModel)) or 0)

    def save(self, record: Invoice) -> Invoice:
        if self.session.get(InvoiceModel, record.id) is not None:
            raise InvalidInput(f"Invoice {record.id} already exists")
        row = InvoiceModel(
            id=record.id,
            customer_name=record.customer_name,
            line_items=[
                {"item_id": line.item_id, "quantity": line.quantity, "price": str(line.price)}
                for line in record.items
            ],
            total_amount=str(record.total_amount),
            date=record.date,
        )
        self.session.add(row)
        self.session.flush()
        return record

    def delete_by_id(self, record_id: str) -> bool:
        raise InvalidInput("invoices are append-only and cannot be deleted")
