"""
Read-only aggregate queries over a `ProductIndex`.

Every function is a single O(n) in-order pass. Ties in best/least seller go
to the first record visited, which for in-order traversal is the lowest id.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from sales_insight.domain.models import ProductRecord
from sales_insight.index.avl import ProductIndex


class LocationSummary(BaseModel):
    """Units and revenue rolled up for one location."""

    location: str
    units: int = 0
    revenue: float = 0.0
    products: int = Field(0, description="Number of matching products.")


class InsightsSummary(BaseModel):
    """Catalog-wide insights: total revenue plus best and least sellers."""

    total_revenue: float = 0.0
    best_seller: Optional[ProductRecord] = None
    least_seller: Optional[ProductRecord] = None
    product_count: int = 0


def ordered_records(index: ProductIndex) -> List[ProductRecord]:
    return list(index.traverse("in"))


def total_revenue(index: ProductIndex) -> float:
    total = 0.0
    for record in index:
        total += record.units_sold * record.price
    return total


def best_seller(index: ProductIndex) -> Optional[ProductRecord]:
    best: Optional[ProductRecord] = None
    for record in index:
        if best is None or record.units_sold > best.units_sold:
            best = record
    return best


def least_seller(index: ProductIndex) -> Optional[ProductRecord]:
    least: Optional[ProductRecord] = None
    for record in index:
        if least is None or record.units_sold < least.units_sold:
            least = record
    return least


def location_rollup(index: ProductIndex, location: str) -> LocationSummary:
    """
    Sum units and revenue over records whose location equals `location`.

    Matching is exact and case-sensitive; no trimming or normalization.
    """
    summary = LocationSummary(location=location)
    for record in index:
        if record.location == location:
            summary.units += record.units_sold
            summary.revenue += record.units_sold * record.price
            summary.products += 1
    return summary


def summarize(index: ProductIndex) -> InsightsSummary:
    """Compute total revenue and best/least seller in one pass."""
    summary = InsightsSummary()
    for record in index:
        summary.total_revenue += record.units_sold * record.price
        summary.product_count += 1
        if summary.best_seller is None or record.units_sold > summary.best_seller.units_sold:
            summary.best_seller = record
        if summary.least_seller is None or record.units_sold < summary.least_seller.units_sold:
            summary.least_seller = record
    return summary


__all__ = [
    "InsightsSummary",
    "LocationSummary",
    "best_seller",
    "least_seller",
    "location_rollup",
    "ordered_records",
    "summarize",
    "total_revenue",
]
