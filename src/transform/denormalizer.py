# =========================================
# 📄 File: src/transform/denormalizer.py
# Purpose: Build nested Customer -> Order -> Item documents
# - Pass 1: attach items to every order
# - Pass 2: regroup the enriched orders and attach them to every customer
# - Each pass is a parallel map over a read-only grouping index
# =========================================

import logging  # Used for stage logging
from concurrent.futures import ThreadPoolExecutor  # Worker pool for the per-parent transforms
from dataclasses import replace  # Copy a frozen record with one field swapped
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from src.models import Customer, Item, Order
from src.transform.grouping_index import group_items_by_order, group_orders_by_customer

log = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_WORKERS = 4


def parallel_map(func: Callable[[T], R], elements: Sequence[T], max_workers: int = DEFAULT_MAX_WORKERS) -> List[R]:
    """
    Apply func to every element on a thread pool.
    executor.map yields results in input order whatever the completion order.
    """
    if not elements:
        return []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, elements))


# -----------------------
# Per-element transforms (pure)
# -----------------------


def attach_items(order: Order, items_by_order: Dict[int, List[Item]]) -> Order:
    """Return a copy of the order holding its item group; no group -> no items."""
    return replace(order, items=list(items_by_order.get(order.id, ())))


def attach_orders(customer: Customer, orders_by_customer: Dict[int, List[Order]]) -> Customer:
    """Return a copy of the customer holding its order group; no group -> no orders."""
    return replace(customer, orders=list(orders_by_customer.get(customer.id, ())))


# -----------------------
# Stages
# -----------------------


def enrich_orders(
    orders: Sequence[Order],
    items_by_order: Dict[int, List[Item]],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Order]:
    return parallel_map(partial(attach_items, items_by_order=items_by_order), orders, max_workers)


def enrich_customers(
    customers: Sequence[Customer],
    orders_by_customer: Dict[int, List[Order]],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Customer]:
    return parallel_map(partial(attach_orders, orders_by_customer=orders_by_customer), customers, max_workers)


def denormalize(
    customers: Sequence[Customer],
    orders: Sequence[Order],
    items: Sequence[Item],
    max_workers: int = DEFAULT_MAX_WORKERS,
    on_stage: Optional[Callable[[str], object]] = None,
) -> List[Customer]:
    """
    Two sequential passes: orders must hold their items before they are
    grouped under customers. Children whose parent key matches nothing are
    left out of the result without error.
    on_stage, when given, is called with a progress label after each pass.
    """
    items_by_order = group_items_by_order(items)
    enriched_orders = enrich_orders(orders, items_by_order, max_workers)
    log.debug(f"Enriched {len(enriched_orders)} orders from {len(items_by_order)} item groups")
    if on_stage is not None:
        on_stage(f"converted {len(enriched_orders)} orders")

    orders_by_customer = group_orders_by_customer(enriched_orders)  # rebuilt over the enriched orders
    enriched_customers = enrich_customers(customers, orders_by_customer, max_workers)
    log.debug(f"Enriched {len(enriched_customers)} customers from {len(orders_by_customer)} order groups")
    if on_stage is not None:
        on_stage(f"converted {len(enriched_customers)} customers")

    return enriched_customers
