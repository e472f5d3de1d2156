# =========================================
# 📄 File: src/extract/tables.py
# Purpose: SQLAlchemy Core definitions of the normalized source tables
# - customer / "order" / item in a configurable schema (default: simple)
# - Shared by the row fetchers and by scripts/db_setup.py
# =========================================

from typing import NamedTuple, Optional

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    MetaData,
    Table,
    Text,
)


class SourceTables(NamedTuple):
    metadata: MetaData
    customer: Table
    order: Table
    item: Table


def build_tables(schema: Optional[str] = "simple") -> SourceTables:
    """
    Build the three source tables bound to a fresh MetaData.
    Descriptions and foreign keys are nullable in the database; the fetchers
    treat a NULL there as fatal.
    """
    metadata = MetaData(schema=schema)  # schema=None -> default schema (used by SQLite tests)
    prefix = f"{schema}." if schema else ""

    customer = Table(
        "customer",
        metadata,
        Column("id", BigInteger, primary_key=True, autoincrement=False),
        Column("description", Text),
    )

    order = Table(
        "order",  # reserved word: SQLAlchemy quotes it for us
        metadata,
        Column("id", BigInteger, primary_key=True, autoincrement=False),
        Column("order_description", Text),
        Column("customer_id", BigInteger, ForeignKey(f"{prefix}customer.id")),
    )

    item = Table(
        "item",
        metadata,
        Column("id", BigInteger, primary_key=True, autoincrement=False),
        Column("item_description", Text),
        Column("order_id", BigInteger, ForeignKey(f"{prefix}order.id")),
    )

    return SourceTables(metadata, customer, order, item)
