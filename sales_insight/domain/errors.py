"""
Error taxonomy for Sales Insight.

Every error raised by the index, analytics, prediction and storage layers is
non-fatal: the CLI reports it and carries on. Each class also derives from the
closest builtin so callers may catch `KeyError`/`ValueError` generically.
"""

from __future__ import annotations


class SalesInsightError(Exception):
    """Base class for all domain errors."""


class DuplicateKeyError(SalesInsightError, KeyError):
    """Insert of an id that is already present. The index is left unchanged."""

    def __init__(self, product_id: int) -> None:
        super().__init__(product_id)
        self.product_id = product_id

    def __str__(self) -> str:
        return f"Product ID {self.product_id} already exists."


class ProductNotFoundError(SalesInsightError, KeyError):
    """Lookup, delete or update of an id that is not present."""

    def __init__(self, product_id: int) -> None:
        super().__init__(product_id)
        self.product_id = product_id

    def __str__(self) -> str:
        return f"Product ID {self.product_id} not found."


class InsufficientHistoryError(SalesInsightError, ValueError):
    """Prediction requested for a product with an empty sales window."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Not enough past data for product {product_id}.")
        self.product_id = product_id


class IndexInvariantError(SalesInsightError, AssertionError):
    """The AVL index violates its ordering, height or balance invariant."""


class RecordFormatError(SalesInsightError, ValueError):
    """A persisted line could not be parsed into a product record."""


__all__ = [
    "SalesInsightError",
    "DuplicateKeyError",
    "ProductNotFoundError",
    "InsufficientHistoryError",
    "IndexInvariantError",
    "RecordFormatError",
]
