from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Customer:
    id: str
    name: str
    contact: str | None = None
    address: str | None = None
