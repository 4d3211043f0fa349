"""
Pytest configuration for Sales Insight.

Provides fixtures for:
- Building product records with sensible defaults
- Pre-populated indexes
- Isolated data files and settings per test
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Generator, Iterable

import pytest

from sales_insight.config import Settings, get_settings
from sales_insight.domain.models import ProductRecord, SalesWindow
from sales_insight.index.avl import ProductIndex

RecordFactory = Callable[..., ProductRecord]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path: Path) -> Generator[None, None, None]:
    """
    Point the default data file into the test's tmp dir and reset the cache.

    Keeps tests from reading a developer's `.env` or `sales_data.txt`. Root
    logging handlers installed by the CLI are removed afterwards.
    """
    monkeypatch.chdir(tmp_path)
    for var in ("SALES_DATA_FILE", "APP_ENV", "LOG_LEVEL", "LOG_JSON", "PROFILE_IO"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    get_settings.cache_clear()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(data_file=tmp_path / "sales_data.txt", log_level="DEBUG")


@pytest.fixture
def make_record() -> RecordFactory:
    """
    Factory for records; only `id` is required.
    """

    def _make(product_id: int, past_sales: Iterable[int] = (), **overrides: Any) -> ProductRecord:
        fields: dict[str, Any] = {
            "name": f"Product {product_id}",
            "weight": 1.0,
            "color": "red",
            "location": "A",
            "units_sold": 0,
            "price": 1.0,
        }
        fields.update(overrides)
        return ProductRecord(id=product_id, past_sales=SalesWindow(values=list(past_sales)), **fields)

    return _make


@pytest.fixture
def build_index(make_record: RecordFactory) -> Callable[[Iterable[int]], ProductIndex]:
    """
    Build an index by inserting default records for each id, in order.
    """

    def _build(ids: Iterable[int]) -> ProductIndex:
        index = ProductIndex()
        for product_id in ids:
            index.insert(make_record(product_id))
        return index

    return _build


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "sales_data.txt"


@pytest.fixture
def sample_lines() -> list[str]:
    """
    A small persisted catalog, written out of id order on purpose.
    """
    return [
        "20,Lamp,2.50,black,North,12,19.99,5,7,-1,-1,-1,2",
        "10,Mug,0.30,red,South,40,4.50,10,20,30,-1,-1,3",
        "30,Chair,8.00,white,North,3,45.00,-1,-1,-1,-1,-1,0",
    ]
