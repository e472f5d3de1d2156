# tests/conftest.py
# ------------------------------------------------------------
# Purpose: Shared fixtures. A tiny customer/order/item dataset,
# a SQLite copy of the source tables and a config dict that
# never touches real PostgreSQL or Elasticsearch.
# ------------------------------------------------------------

import pytest
from sqlalchemy import create_engine

from src.extract.tables import build_tables
from src.models import Customer, Item, Order


@pytest.fixture
def customers():
    return [Customer(1, "A"), Customer(2, "B"), Customer(3, "C")]


@pytest.fixture
def orders():
    return [
        Order(10, "O1", 1),
        Order(11, "O2", 2),
        Order(12, "O3", 1),
        Order(13, "orphan", 999),   # no customer 999
    ]


@pytest.fixture
def items():
    return [
        Item(100, "I1", 10),
        Item(101, "I2", 12),
        Item(102, "I3", 10),
        Item(103, "I4", 13),
        Item(104, "lost", 555),     # no order 555
    ]


@pytest.fixture
def source_tables():
    # schema=None -> SQLite default schema
    return build_tables(schema=None)


@pytest.fixture
def sqlite_engine(tmp_path, source_tables):
    """File-backed SQLite database with the three (empty) source tables."""
    engine = create_engine(f"sqlite:///{tmp_path / 'source.db'}", future=True)
    source_tables.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded_engine(sqlite_engine, source_tables):
    with sqlite_engine.begin() as conn:
        conn.execute(source_tables.customer.insert(), [
            {"id": 2, "description": "B"},
            {"id": 1, "description": "A"},
        ])
        conn.execute(source_tables.order.insert(), [
            {"id": 11, "order_description": "O2", "customer_id": 2},
            {"id": 10, "order_description": "O1", "customer_id": 1},
            {"id": 12, "order_description": "O3", "customer_id": 999},
        ])
        conn.execute(source_tables.item.insert(), [
            {"id": 101, "item_description": "I2", "order_id": 10},
            {"id": 100, "item_description": "I1", "order_id": 10},
            {"id": 102, "item_description": "I3", "order_id": 11},
        ])
    return sqlite_engine


@pytest.fixture
def test_cfg():
    """Minimal validated-config shape used by the pipeline."""
    return {
        "environment": "test",
        "log_level": "WARNING",
        "database_url": "sqlite://",
        "db_schema": None,
        "batch_size": 2000,
        "max_workers": 2,
    }
