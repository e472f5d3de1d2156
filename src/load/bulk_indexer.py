#!/usr/bin/env python3
"""
Bulk Indexer
------------
 - Serializes denormalized customers into the bulk API body:
     {"index": {"_id": <position>}}
     {<customer document with nested orders and items>}
 - Sends everything as ONE bulk request to the fixed "customer" index
 - Success = not response["errors"]; per-item details are not inspected
 - Transport errors and unusable responses raise BulkIndexError
"""

import logging
from typing import Any, Dict, List, Mapping, Sequence

from elasticsearch import ApiError, TransportError

from src.errors import BulkIndexError
from src.models import Customer

log = logging.getLogger(__name__)

INDEX_NAME = "customer"


# -----------------------
# Payload
# -----------------------
def build_bulk_payload(customers: Sequence[Customer]) -> List[Dict[str, Any]]:
    """Action header + document body per customer, ids are zero-based positions."""
    payload: List[Dict[str, Any]] = []
    for idx, customer in enumerate(customers):
        payload.append({"index": {"_id": idx}})
        payload.append(customer.to_document())
    return payload


# -----------------------
# Response
# -----------------------
def parse_bulk_response(body: Any) -> bool:
    """
    Read the top-level boolean `errors` flag and return its negation.
    Anything else is treated as a broken response.
    """
    if not isinstance(body, Mapping):
        raise BulkIndexError(f"Bulk response is not a JSON object: {body!r}")
    if "errors" not in body:
        raise BulkIndexError("Bulk response has no 'errors' field")
    errors = body["errors"]
    if not isinstance(errors, bool):
        raise BulkIndexError(f"Bulk response 'errors' is not a boolean: {errors!r}")
    return not errors


# -----------------------
# Submit
# -----------------------
def bulk_index(
    client,
    customers: Sequence[Customer],
    batch_size: int = 2000,
) -> bool:
    """
    Index all customers in a single bulk call.
    batch_size is advisory only: it is logged, the request is never split.
    """
    payload = build_bulk_payload(customers)
    log.info(
        f"Sending {len(customers)} documents to index '{INDEX_NAME}' "
        f"in one bulk request (batch size hint: {batch_size})"
    )

    try:
        response = client.bulk(index=INDEX_NAME, operations=payload)
    except (ApiError, TransportError) as e:
        raise BulkIndexError(f"Bulk request to '{INDEX_NAME}' failed: {e}") from e

    body = getattr(response, "body", response)  # ObjectApiResponse wraps the parsed JSON
    successful = parse_bulk_response(body)

    if successful:
        log.info(f"✅ Bulk request accepted ({len(customers)} documents)")
    else:
        log.error("Bulk request finished with errors reported by Elasticsearch")
    return successful
