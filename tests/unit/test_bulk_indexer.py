# tests/unit/test_bulk_indexer.py
# ------------------------------------------------------------
# Purpose: Unit tests for payload construction and response
#          handling in src/load/bulk_indexer.py. The Elasticsearch
#          client is a MagicMock; nothing leaves the process.
# ------------------------------------------------------------

import json
from unittest.mock import MagicMock

import pytest
from elasticsearch import ConnectionError as ESConnectionError

from src.errors import BulkIndexError
from src.load.bulk_indexer import (
    INDEX_NAME,
    build_bulk_payload,
    bulk_index,
    parse_bulk_response,
)
from src.models import Customer, Item, Order


def _ndjson(payload):
    # Bulk API wire format: one JSON object per line.
    return "".join(json.dumps(entry) + "\n" for entry in payload)


def _client(response):
    client = MagicMock()
    client.bulk.return_value = response
    return client


def test_payload_alternates_action_and_document(customers):
    payload = build_bulk_payload(customers)

    assert payload[0::2] == [{"index": {"_id": 0}}, {"index": {"_id": 1}}, {"index": {"_id": 2}}]
    assert [doc["id"] for doc in payload[1::2]] == [1, 2, 3]


def test_wire_body_has_two_lines_per_customer(customers):
    lines = _ndjson(build_bulk_payload(customers)).splitlines()

    assert len(lines) == 2 * len(customers)
    assert json.loads(lines[0]) == {"index": {"_id": 0}}
    assert json.loads(lines[1]) == {"id": 1, "description": "A", "orders": []}


def test_payload_carries_nested_documents():
    customer = Customer(1, "A", orders=[Order(10, "O1", 1, items=[Item(100, "I1", 10)])])

    payload = build_bulk_payload([customer])

    assert payload[1]["orders"][0]["items"][0] == {"id": 100, "description": "I1", "order_id": 10}


def test_empty_payload():
    assert build_bulk_payload([]) == []
    assert _ndjson([]) == ""


@pytest.mark.parametrize("body, expected", [({"errors": False}, True), ({"errors": True, "items": []}, False)])
def test_parse_bulk_response_negates_errors_flag(body, expected):
    assert parse_bulk_response(body) is expected


@pytest.mark.parametrize("body", [{}, {"took": 3}, {"errors": "false"}, {"errors": None}, ["errors"], None])
def test_parse_bulk_response_rejects_unusable_bodies(body):
    with pytest.raises(BulkIndexError):
        parse_bulk_response(body)


def test_bulk_index_sends_one_request(customers):
    client = _client({"errors": False, "items": []})

    assert bulk_index(client, customers, batch_size=1) is True

    # The batch size is only a hint: still a single call with everything.
    client.bulk.assert_called_once()
    kwargs = client.bulk.call_args.kwargs
    assert kwargs["index"] == INDEX_NAME == "customer"
    assert len(kwargs["operations"]) == 2 * len(customers)


def test_bulk_index_reports_errors_flag(customers):
    assert bulk_index(_client({"errors": True}), customers) is False


def test_bulk_index_reads_api_response_body(customers):
    response = MagicMock()
    response.body = {"errors": False}

    assert bulk_index(_client(response), customers) is True


def test_bulk_index_missing_errors_field_is_fatal(customers):
    with pytest.raises(BulkIndexError):
        bulk_index(_client({"took": 1}), customers)


def test_bulk_index_transport_failure_is_fatal(customers):
    client = MagicMock()
    client.bulk.side_effect = ESConnectionError("connection refused")

    with pytest.raises(BulkIndexError) as excinfo:
        bulk_index(client, customers)

    assert isinstance(excinfo.value.__cause__, ESConnectionError)
