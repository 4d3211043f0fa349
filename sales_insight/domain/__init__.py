"""
Domain package for Sales Insight.

Exports the product record, its rolling sales window, and the error taxonomy
shared by the index, analytics and storage layers.
"""

from sales_insight.domain.errors import (
    DuplicateKeyError,
    IndexInvariantError,
    InsufficientHistoryError,
    ProductNotFoundError,
    RecordFormatError,
    SalesInsightError,
)
from sales_insight.domain.models import ProductRecord, SalesWindow

__all__ = [
    "ProductRecord",
    "SalesWindow",
    "SalesInsightError",
    "DuplicateKeyError",
    "ProductNotFoundError",
    "InsufficientHistoryError",
    "IndexInvariantError",
    "RecordFormatError",
]
