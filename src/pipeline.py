# =========================================
# 📄 File: src/pipeline.py
# Purpose: One-shot full reload of nested customer documents
# - Extract customers, orders, items from PostgreSQL (tolerant)
# - Denormalize into Customer -> Order -> Item documents (parallel)
# - Bulk-write into Elasticsearch and report the success flag (fatal on failure)
# =========================================

import sys  # Used for the process exit code
import time  # Used to measure elapsed time per stage
import logging  # Used for stage/timing logs
from typing import Any, Dict, Optional

from sqlalchemy import create_engine

from config.config_loader import get_config, mask_db_url
from src.errors import BulkIndexError, MissingFieldError
from src.extract.row_fetchers import fetch_all_customers, fetch_all_items, fetch_all_orders
from src.extract.tables import build_tables
from src.load.bulk_indexer import bulk_index
from src.load.es_client import get_client, ping
from src.transform.denormalizer import denormalize

log = logging.getLogger(__name__)


class StageTimer:
    """Logs elapsed milliseconds since the run started, once per finished stage."""

    def __init__(self):
        self.started = time.perf_counter()

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started) * 1000)

    def mark(self, stage: str) -> int:
        elapsed = self.elapsed_ms()
        log.info(f"{stage} after {elapsed} ms")
        return elapsed


def setup_logging(cfg: Dict[str, Any]) -> None:
    logging.basicConfig(
        level=cfg["log_level"],  # DEBUG in dev, INFO in prod
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def get_engine(cfg: Dict[str, Any]):
    url = cfg["database_url"]
    log.info(f"Connecting to: {mask_db_url(url)}")
    return create_engine(url, future=True, pool_pre_ping=True)


def run(cfg: Dict[str, Any], engine=None, client=None) -> bool:
    """
    Steps:
      1) Extract the three tables (a failed fetch yields no rows)
      2) Denormalize in two passes (orders <- items, customers <- orders)
      3) Bulk-write to the index and return `not errors`
    """
    timer = StageTimer()
    engine = engine if engine is not None else get_engine(cfg)
    tables = build_tables(cfg["db_schema"])

    # ---------------------------------
    # 1) EXTRACT
    # ---------------------------------
    customers = fetch_all_customers(engine, tables)
    orders = fetch_all_orders(engine, tables)
    items = fetch_all_items(engine, tables)
    for result in (customers, orders, items):
        if not result.ok:
            log.warning(f"Continuing without {result.table} rows")
    timer.mark("fetched all data")

    # ---------------------------------
    # 2) DENORMALIZE
    # ---------------------------------
    documents = denormalize(
        customers.rows, orders.rows, items.rows,
        max_workers=cfg["max_workers"],
        on_stage=timer.mark,  # one timing line per enrichment pass
    )

    # ---------------------------------
    # 3) LOAD
    # ---------------------------------
    client = client if client is not None else get_client()
    ping(client)
    successful = bulk_index(client, documents, batch_size=cfg["batch_size"])
    timer.mark("bulk indexed")

    return successful


def main(cfg: Optional[Dict[str, Any]] = None) -> int:
    cfg = cfg if cfg is not None else get_config()
    setup_logging(cfg)
    try:
        successful = run(cfg)
    except MissingFieldError as e:
        log.error(f"❌ Required field missing, aborting: {e}")
        return 1
    except BulkIndexError as e:
        log.error(f"❌ Bulk write failed, aborting: {e}")
        return 1
    except Exception as e:
        log.exception(f"❌ Indexing run failed: {e}")
        return 1

    print(successful)
    return 0 if successful else 1


if __name__ == "__main__":
    sys.exit(main())
