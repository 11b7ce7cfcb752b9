from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Service:
    id: str
    store_id: str
    name: str
    duration: int  # minutes
    price: Decimal
    description: str = ""
    currency: str = "BRL"
    is_active: bool = True
