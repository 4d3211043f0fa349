"""
Sales Insight - product sales catalog on a self-balancing AVL index.

The package keeps every product record in an AVL tree keyed by product id and
offers:

- Ordered insert, search and delete with automatic rebalancing
- Whole-catalog analytics (revenue, best/least seller, per-location rollups)
- A trailing moving-average sales prediction per product
- Flat-file persistence loaded and saved at session boundaries
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from sales_insight.analytics import (
    InsightsSummary,
    LocationSummary,
    best_seller,
    least_seller,
    location_rollup,
    ordered_records,
    summarize,
    total_revenue,
)
from sales_insight.config import Settings, get_settings
from sales_insight.domain import (
    DuplicateKeyError,
    IndexInvariantError,
    InsufficientHistoryError,
    ProductNotFoundError,
    ProductRecord,
    RecordFormatError,
    SalesInsightError,
    SalesWindow,
)
from sales_insight.index import ProductIndex
from sales_insight.prediction import predict, record_sale, update_sales
from sales_insight.session import SalesSession, open_session
from sales_insight.storage import load_index, save_index
from sales_insight.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "ProductRecord",
    "SalesWindow",
    "SalesInsightError",
    "DuplicateKeyError",
    "ProductNotFoundError",
    "InsufficientHistoryError",
    "IndexInvariantError",
    "RecordFormatError",
    # Index
    "ProductIndex",
    # Analytics and prediction
    "InsightsSummary",
    "LocationSummary",
    "best_seller",
    "least_seller",
    "location_rollup",
    "ordered_records",
    "summarize",
    "total_revenue",
    "predict",
    "record_sale",
    "update_sales",
    # Session and storage
    "SalesSession",
    "open_session",
    "load_index",
    "save_index",
    # Logging
    "configure_logging",
    "get_logger",
]
