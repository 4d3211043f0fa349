"""
Session context owning the product index between load and save.

A session is the single owner of the AVL index for one CLI invocation or
interactive shell. It is initialized from the data file and written back on
close, replacing any process-wide root.

Usage:
    from sales_insight.session import open_session

    with open_session("sales_data.txt") as session:
        session.add_product(id=1, name="Mug", weight=0.3, color="red",
                            location="A", units_sold=10, price=4.5)
        print(session.insights())
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, List, Optional

from sales_insight import analytics, prediction
from sales_insight.analytics import InsightsSummary, LocationSummary
from sales_insight.config import get_settings
from sales_insight.domain.models import ProductRecord
from sales_insight.index.avl import ProductIndex
from sales_insight.storage.flat_file import LoadReport, load_index, save_index
from sales_insight.utils.logging import get_logger
from sales_insight.utils.profiler import profile_block

log = get_logger(__name__)


class SalesSession:
    """
    Index plus its backing file.

    `dirty` is set by every successful mutation and cleared by `save`.
    """

    def __init__(
        self,
        data_file: Path | str,
        index: Optional[ProductIndex] = None,
        profile_io: bool = False,
    ) -> None:
        self.data_file = Path(data_file)
        self.index = index if index is not None else ProductIndex()
        self.profile_io = profile_io
        self.load_report = LoadReport()
        self.dirty = False

    @classmethod
    def load(cls, data_file: Path | str, profile_io: bool = False) -> "SalesSession":
        """Create a session from the data file (empty if it does not exist)."""
        with profile_block("load") as stats:
            index, report = load_index(data_file)
        if profile_io:
            log.info(
                "[PROFILE] load",
                extra={
                    "duration_seconds": round(stats.duration_seconds, 4),
                    "peak_rss_bytes": stats.peak_rss_bytes,
                    "records": report.loaded,
                },
            )
        session = cls(data_file, index=index, profile_io=profile_io)
        session.load_report = report
        return session

    def save(self) -> int:
        with profile_block("save") as stats:
            written = save_index(self.index, self.data_file)
        if self.profile_io:
            log.info(
                "[PROFILE] save",
                extra={
                    "duration_seconds": round(stats.duration_seconds, 4),
                    "peak_rss_bytes": stats.peak_rss_bytes,
                    "records": written,
                },
            )
        self.dirty = False
        return written

    # Mutations

    def add_product(
        self,
        id: int,
        name: str,
        weight: float,
        color: str,
        location: str,
        units_sold: int,
        price: float,
    ) -> ProductRecord:
        record = ProductRecord(
            id=id,
            name=name,
            weight=weight,
            color=color,
            location=location,
            units_sold=units_sold,
            price=price,
        )
        self.index.insert(record)
        self.dirty = True
        return record

    def remove_product(self, product_id: int) -> ProductRecord:
        record = self.index.delete(product_id)
        self.dirty = True
        return record

    def update_sales(self, product_id: int, units_sold: int, past_sale: int) -> ProductRecord:
        record = self.index.get(product_id)
        prediction.update_sales(record, units_sold, past_sale)
        self.dirty = True
        return record

    # Queries

    def find(self, product_id: int) -> Optional[ProductRecord]:
        return self.index.search(product_id)

    def products(self) -> List[ProductRecord]:
        return analytics.ordered_records(self.index)

    def insights(self) -> InsightsSummary:
        return analytics.summarize(self.index)

    def location(self, location: str) -> LocationSummary:
        return analytics.location_rollup(self.index, location)

    def predict(self, product_id: int) -> int:
        return prediction.predict(self.index.get(product_id))


@contextmanager
def open_session(
    data_file: Path | str | None = None,
    autosave: bool = True,
) -> Generator[SalesSession, None, None]:
    """
    Load a session and save it on clean exit when it was modified.

    Nothing is written if the block raises.
    """
    settings = get_settings()
    path = Path(data_file) if data_file is not None else settings.data_file
    session = SalesSession.load(path, profile_io=settings.profile_io)
    yield session
    if autosave and session.dirty:
        session.save()


__all__ = ["SalesSession", "open_session"]
