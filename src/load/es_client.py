"""Process-wide Elasticsearch client, created on first use and reused afterwards."""

import logging
from typing import Optional

from elasticsearch import Elasticsearch

log = logging.getLogger(__name__)

# The client's default node; the job takes no destination settings
DEFAULT_HOST = "http://localhost:9200"

_client: Optional[Elasticsearch] = None


def get_client() -> Elasticsearch:
    global _client
    if _client is None:
        log.info(f"Creating Elasticsearch client for {DEFAULT_HOST}")
        _client = Elasticsearch(DEFAULT_HOST)
    return _client


def reset_client() -> None:
    global _client
    _client = None


def ping(client: Elasticsearch) -> bool:
    """Informational reachability check; the bulk call decides success."""
    reachable = bool(client.ping())
    if reachable:
        log.info("Elasticsearch is reachable")
    else:
        log.warning("Elasticsearch did not answer the ping")
    return reachable
