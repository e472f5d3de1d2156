#!/usr/bin/env python3
# =========================================
# 📄 File: scripts/db_setup.py
# Purpose: Create the normalized source schema and seed it with random rows
# - simple.customer, simple."order", simple.item (see src/extract/tables.py)
# - Random descriptions (md5 of random()) and random parent keys
# =========================================

import sys
import logging
import argparse
from contextlib import contextmanager

from sqlalchemy import BigInteger, Text, cast, create_engine, func, insert, select, text

from config.config_loader import get_config, mask_db_url
from src.extract.tables import build_tables


# -----------------------
# Configuration & Logging
# -----------------------
cfg = get_config()

logging.basicConfig(
    level=cfg["log_level"],
    format="%(asctime)s [%(levelname)s] %(message)s",
)
log = logging.getLogger(__name__)

SCHEMA = cfg["db_schema"]
TABLES = build_tables(SCHEMA)


# -----------------------
# Engine / helpers
# -----------------------


def get_engine(echo: bool = False):
    """
    Create SQLAlchemy engine from the DATABASE_URL-backed config value.
    """
    db_url = cfg["database_url"]
    log.info(f"Connecting to database at: {mask_db_url(db_url)}")
    return create_engine(db_url, echo=echo, pool_pre_ping=True, future=True)


@contextmanager
def begin_conn(engine):
    with engine.begin() as conn:
        yield conn


def ensure_schema(engine):
    if SCHEMA.lower() != "public":
        log.info(f"Ensuring schema '{SCHEMA}' exists…")
        with begin_conn(engine) as conn:
            conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}"))
    else:
        log.info("Using default schema 'public'.")


def drop_tables(engine):
    log.warning("Dropping tables (customer, order, item)…")
    TABLES.metadata.drop_all(engine, checkfirst=True)


def create_tables(engine):
    log.info("Creating tables (customer, order, item)…")
    TABLES.metadata.create_all(engine, checkfirst=True)


# -----------------------
# Seeding
# -----------------------


def _random_description():
    return func.md5(cast(func.random(), Text))


def _random_parent_id(parent_count: int):
    # Uniform in [1, parent_count], same shape as (random() * (n - 1) + 1)::int
    return cast(func.random() * (parent_count - 1) + 1, BigInteger)


def seed(engine, customers: int, orders: int, items: int):
    """
    Fill the three tables server-side with generate_series().
    Every order points at some customer and every item at some order.
    """
    with begin_conn(engine) as conn:
        ids = func.generate_series(1, customers).column_valued("id")
        conn.execute(
            insert(TABLES.customer).from_select(
                ["id", "description"],
                select(ids, _random_description()),
            )
        )
        log.info(f"Seeded {customers} customers")

        ids = func.generate_series(1, orders).column_valued("id")
        conn.execute(
            insert(TABLES.order).from_select(
                ["id", "order_description", "customer_id"],
                select(ids, _random_description(), _random_parent_id(customers)),
            )
        )
        log.info(f"Seeded {orders} orders")

        ids = func.generate_series(1, items).column_valued("id")
        conn.execute(
            insert(TABLES.item).from_select(
                ["id", "item_description", "order_id"],
                select(ids, _random_description(), _random_parent_id(orders)),
            )
        )
        log.info(f"Seeded {items} items")


# -----------------------
# CLI interface
# -----------------------
def parse_args(argv=None):
    """
    --echo      : print SQL statements being executed
    --recreate  : drop and recreate all tables
    --no-seed   : only create the schema and tables
    """
    p = argparse.ArgumentParser(description="Source database setup for the customer indexer")
    p.add_argument("--echo", action="store_true", help="Print SQL statements")
    p.add_argument("--recreate", action="store_true", help="Drop and recreate all tables before running")
    p.add_argument("--no-seed", action="store_true", help="Skip random data generation")
    p.add_argument("--customers", type=int, default=1000, help="Number of customers to generate")
    p.add_argument("--orders", type=int, default=10000, help="Number of orders to generate")
    p.add_argument("--items", type=int, default=100000, help="Number of items to generate")
    return p.parse_args(argv)


def main():
    args = parse_args()
    try:
        engine = get_engine(echo=args.echo)
        ensure_schema(engine)

        if args.recreate:
            drop_tables(engine)

        create_tables(engine)
        if not args.no_seed:
            seed(engine, args.customers, args.orders, args.items)

        log.info("✅ Database setup complete.")
        return 0
    except Exception as e:
        log.exception(f"❌ DB setup failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
