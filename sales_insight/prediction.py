"""
Naive sales prediction from a product's rolling sales window.

The forecast is a plain trailing moving average over at most the last five
recorded months.
"""

from __future__ import annotations

from sales_insight.domain.errors import InsufficientHistoryError
from sales_insight.domain.models import ProductRecord


def predict(record: ProductRecord) -> int:
    """
    Predict next-month unit sales for `record`.

    Returns
    -------
    int
        Truncating integer average of the window entries.

    Raises
    ------
    InsufficientHistoryError
        If no past sales have been recorded.
    """
    average = record.past_sales.average()
    if average is None:
        raise InsufficientHistoryError(record.id)
    return average


def record_sale(record: ProductRecord, value: int) -> None:
    """Push `value` into the record's window, evicting the oldest when full."""
    record.past_sales.push(value)


def update_sales(record: ProductRecord, units_sold: int, past_sale: int) -> ProductRecord:
    """Overwrite the current units sold and record one past-month figure."""
    record.units_sold = units_sold
    record_sale(record, past_sale)
    return record


__all__ = ["predict", "record_sale", "update_sales"]
