"""
Domain records
--------------
 - Item, Order and Customer as fetched from the relational source
 - Orders carry their items and customers their orders once denormalized
 - to_document() renders the nested JSON shape written to the index
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List


@dataclass(frozen=True)
class Item:
    id: int
    description: str
    order_id: int


@dataclass(frozen=True)
class Order:
    id: int
    description: str
    customer_id: int
    items: List[Item] = field(default_factory=list)


@dataclass(frozen=True)
class Customer:
    id: int
    description: str
    orders: List[Order] = field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        """Nested dict with orders and their items, ready for JSON encoding."""
        return asdict(self)
