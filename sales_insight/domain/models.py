"""
Domain models for Sales Insight.

`ProductRecord` is the payload owned by each node of the AVL index.
`SalesWindow` is the bounded FIFO of recent monthly sales feeding the
moving-average prediction; it replaces a sentinel-filled fixed array with an
explicit container, so "-1 means empty" only exists in the file format.
"""
from __future__ import annotations

from typing import ClassVar, List, Optional

from pydantic import BaseModel, Field


class SalesWindow(BaseModel):
    """
    Fixed-capacity FIFO of past sales figures, oldest first.
    """

    CAPACITY: ClassVar[int] = 5

    values: List[int] = Field(
        default_factory=list,
        max_length=5,
        description="Valid window entries, oldest first.",
    )

    model_config = {"validate_assignment": True}

    def push(self, value: int) -> None:
        """Append `value`, discarding the oldest entry once the window is full."""
        if len(self.values) >= self.CAPACITY:
            del self.values[0]
        self.values.append(int(value))

    def average(self) -> Optional[int]:
        """
        Truncating integer mean of the window, or None when it is empty.

        Truncation is toward zero, like C integer division.
        """
        if not self.values:
            return None
        total = sum(self.values)
        quotient = abs(total) // len(self.values)
        return quotient if total >= 0 else -quotient

    @property
    def count(self) -> int:
        return len(self.values)

    @property
    def is_full(self) -> bool:
        return len(self.values) >= self.CAPACITY


class ProductRecord(BaseModel):
    """
    A single product in the catalog.
    """

    id: int = Field(..., frozen=True, description="Unique product identifier.")
    name: str = Field(..., description="Display name.")
    weight: float = Field(..., description="Unit weight.")
    color: str = Field(..., description="Color label.")
    location: str = Field(..., description="Store location; matched exactly in rollups.")
    units_sold: int = Field(0, description="Units sold in the current period.")
    price: float = Field(..., description="Unit price.")
    past_sales: SalesWindow = Field(
        default_factory=SalesWindow,
        description="Rolling window of past monthly sales.",
    )

    model_config = {"validate_assignment": True}

    @property
    def revenue(self) -> float:
        return self.units_sold * self.price


__all__ = ["ProductRecord", "SalesWindow"]
