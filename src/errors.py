"""
Error kinds for the indexing job
--------------------------------
 - FetchResult : tolerant outcome of a row fetch (rows, or the error that emptied it)
 - MissingFieldError : a required column came back NULL (fatal)
 - BulkIndexError : the bulk write failed or its response is unusable (fatal)
"""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class MissingFieldError(ValueError):
    """A NULL in a column the documents cannot do without."""

    def __init__(self, table: str, column: str, row_id):
        super().__init__(f"{table}.{column} is NULL for id={row_id}")
        self.table = table
        self.column = column
        self.row_id = row_id


class BulkIndexError(RuntimeError):
    """The destination did not accept the bulk request or answered with garbage."""


@dataclass
class FetchResult(Generic[T]):
    """
    Outcome of one row fetch. A failed fetch is not raised: it is kept here
    with an empty row list so the pipeline can continue on partial data.
    """

    table: str
    rows: List[T] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
