# =========================================
# 📄 File: src/transform/grouping_index.py
# Purpose: Group child rows by their parent key in a single pass
# - order_id    -> [Item]   (fetch order kept inside each group)
# - customer_id -> [Order]  (fetch order kept inside each group)
# =========================================

from typing import Callable, Dict, Hashable, Iterable, List, TypeVar

from src.models import Item, Order

T = TypeVar("T")


def group_by_key(rows: Iterable[T], key: Callable[[T], Hashable]) -> Dict[Hashable, List[T]]:
    """
    Linear-time grouping: one dict lookup per row instead of a scan per parent.
    Keys without rows are absent from the result (never mapped to []).
    """
    groups: Dict[Hashable, List[T]] = {}
    for row in rows:
        groups.setdefault(key(row), []).append(row)  # append keeps input order within a group
    return groups


def group_items_by_order(items: Iterable[Item]) -> Dict[int, List[Item]]:
    return group_by_key(items, lambda item: item.order_id)


def group_orders_by_customer(orders: Iterable[Order]) -> Dict[int, List[Order]]:
    return group_by_key(orders, lambda order: order.customer_id)
