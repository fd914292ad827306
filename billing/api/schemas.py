from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from billing.domain.catalog.aggregates import MAX_ITEM_PRICE


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=1)
    role: str | None = None


class ItemCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    price: Decimal = Field(ge=0, le=MAX_ITEM_PRICE, decimal_places=2)
    description: str | None = None


class ItemUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, min_length=1, max_length=256)
    price: Decimal | None = Field(default=None, ge=0, le=MAX_ITEM_PRICE, decimal_places=2)
    description: str | None = None


class CustomerCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    contact: str | None = None
    address: str | None = None
