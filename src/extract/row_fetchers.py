#!/usr/bin/env python3
"""
Row Fetchers
------------
 - Reads customers, orders and items from PostgreSQL, ordered by primary key
 - Converts each row into a typed record (src/models.py)
 - A failed query degrades to an empty FetchResult (logged, not raised)
 - A NULL description or foreign key raises MissingFieldError (fatal)
"""

import logging
from typing import Any, Callable, List

import pandas as pd
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from src.errors import FetchResult, MissingFieldError
from src.extract.tables import SourceTables
from src.models import Customer, Item, Order

log = logging.getLogger(__name__)


# -----------------------
# Row conversion
# -----------------------
def _required(row, column: str, table: str) -> Any:
    value = getattr(row, column)
    if pd.isna(value):
        raise MissingFieldError(table, column, row.id)
    return value


def row_to_customer(row) -> Customer:
    return Customer(
        id=int(row.id),
        description=str(_required(row, "description", "customer")),
    )


def row_to_order(row) -> Order:
    return Order(
        id=int(row.id),
        description=str(_required(row, "order_description", "order")),
        customer_id=int(_required(row, "customer_id", "order")),
    )


def row_to_item(row) -> Item:
    return Item(
        id=int(row.id),
        description=str(_required(row, "item_description", "item")),
        order_id=int(_required(row, "order_id", "item")),
    )


# -----------------------
# Fetching
# -----------------------
def _fetch(engine, table: str, stmt, to_record: Callable) -> FetchResult:
    """
    Run one SELECT through pandas and convert every row.
    Only database errors are absorbed; conversion errors propagate.
    """
    try:
        df = pd.read_sql(stmt, engine)
    except (SQLAlchemyError, pd.errors.DatabaseError) as e:  # pandas >= 2.2 wraps driver errors
        log.warning(f"Fetching {table} failed, continuing with no rows: {e}")
        return FetchResult(table=table, error=e)

    rows: List = [to_record(row) for row in df.itertuples(index=False)]
    log.info(f"Fetched {len(rows)} rows from {table}")
    return FetchResult(table=table, rows=rows)


def fetch_all_customers(engine, tables: SourceTables) -> FetchResult:
    t = tables.customer
    stmt = select(t.c.id, t.c.description).order_by(t.c.id.asc())
    return _fetch(engine, "customer", stmt, row_to_customer)


def fetch_all_orders(engine, tables: SourceTables) -> FetchResult:
    t = tables.order
    stmt = select(t.c.id, t.c.order_description, t.c.customer_id).order_by(t.c.id.asc())
    return _fetch(engine, "order", stmt, row_to_order)


def fetch_all_items(engine, tables: SourceTables) -> FetchResult:
    t = tables.item
    stmt = select(t.c.id, t.c.item_description, t.c.order_id).order_by(t.c.id.asc())
    return _fetch(engine, "item", stmt, row_to_item)
